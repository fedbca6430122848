"""Tests for the TSLN encoder."""

import pytest

from tsln import EncodeOptions, encode
from tsln.model import DataPoint, EncodingStrategy, FieldType, TimestampMode

from conftest import generate_crypto_points


class TestDocumentLayout:

    def test_exact_document(self, make_points):
        points = make_points({"symbol": ["BTC"] * 3, "price": [100, 101, 102]})
        document = encode(points)
        assert document.text == (
            "#TSLN/1\n"
            "#ts regular base=2025-12-27T10:00:00.000Z step=1000 n=3\n"
            "#flags diff=1 repeat=1\n"
            "#fields symbol:str:repeat|price:num:diff\n"
            "---\n"
            "BTC|100\n"
            "^|+1\n"
            "^|+1"
        )

    def test_schema(self, make_points):
        points = make_points({"symbol": ["BTC"] * 3, "price": [100, 101, 102]})
        schema = encode(points).schema
        assert schema.version == 1
        assert schema.point_count == 3
        assert schema.interval_ms == 1000
        assert [(f.name, f.type, f.strategy) for f in schema.fields] == [
            ("symbol", FieldType.STRING, EncodingStrategy.REPEAT),
            ("price", FieldType.NUMERIC, EncodingStrategy.DIFFERENTIAL),
        ]

    def test_empty_dataset(self):
        document = encode([])
        assert document.text == (
            "#TSLN/1\n"
            "#ts regular base=~ step=~ n=0\n"
            "#flags diff=1 repeat=1\n"
            "#fields\n"
            "---"
        )

    def test_single_point_has_no_step(self, make_points):
        document = encode(make_points({"v": [7]}))
        assert "step=~ n=1" in document.header
        assert document.body == "7"

    def test_field_names_escaped(self, make_points):
        document = encode(make_points({"a|b:c": [1, 5, 2]}))
        assert "#fields a\\|b\\:c:num:" in document.header

    def test_dict_records_accepted(self):
        records = [
            {"timestamp": "2025-12-27T10:00:00.000Z", "data": {"v": 1}},
            {"timestamp": "2025-12-27T10:00:01.000Z", "data": {"v": 2}},
        ]
        assert encode(records).body == "1\n+1"

    def test_invalid_record_type(self):
        with pytest.raises(TypeError, match="DataPoint or dict"):
            encode([42])


class TestTimestamps:

    def test_regular_rows_carry_no_timestamp(self):
        points = generate_crypto_points(500)
        document = encode(points)
        assert document.schema.timestamp_mode is TimestampMode.REGULAR
        rows = document.body.split("\n")
        assert len(rows) == 500
        assert all(len(row.split("|")) == 5 for row in rows)
        assert rows[0].split("|")[0] == "BTC"

    def test_irregular_rows_start_with_offset(self, make_points):
        points = make_points({"v": [1, 2, 3, 4]}, offsets_ms=[0, 1000, 1500, 3700])
        document = encode(points)
        assert document.schema.timestamp_mode is TimestampMode.OFFSET
        assert "#ts offset base=2025-12-27T10:00:00.000Z n=4" in document.header
        rows = document.body.split("\n")
        assert [row.split("|")[0] for row in rows] == ["0", "1000", "500", "2200"]


class TestStrategies:

    def test_differential_nulls_reset(self, make_points):
        """A null is written literally and the next value restarts the chain."""
        document = encode(make_points({"v": [1, None, 3]}))
        assert document.schema.fields[0].strategy is EncodingStrategy.DIFFERENTIAL
        assert document.body == "1\n~\n3"

    def test_inexact_delta_falls_back_to_literal(self, make_points):
        document = encode(make_points({"v": [1.5, -0.0]}))
        assert document.schema.fields[0].strategy is EncodingStrategy.DIFFERENTIAL
        assert document.body == "1.5\n=-0.0"

    def test_int_after_float_uses_literal(self, make_points):
        document = encode(make_points({"v": [2.0, 3]}))
        assert document.body == "2.0\n=3"

    def test_repeat_restarts_after_change(self, make_points):
        values = ["A"] * 10 + ["B"] * 10
        document = encode(make_points({"s": values}))
        rows = document.body.split("\n")
        assert rows[0] == "A"
        assert rows[10] == "B"
        assert rows.count("^") == 18

    def test_mixed_field_tags_strings(self, make_points):
        document = encode(make_points({"m": [1, "a", True]}))
        assert document.body == '1\n"a\nT'

    def test_reserved_strings_in_repeat_field(self, make_points):
        values = ["^"] * 10 + ["~"]
        document = encode(make_points({"s": values}))
        rows = document.body.split("\n")
        assert rows[0] == "\\^"
        assert rows[1] == "^"
        assert rows[-1] == "\\~"

    def test_absent_field_written_as_null(self):
        points = [DataPoint(0, {"a": 1}), DataPoint(1000, {}), DataPoint(2000, {"a": 2})]
        assert encode(points).body.split("\n")[1] == "~"


class TestOptions:

    def test_flags_disabled(self, make_points):
        points = make_points({"symbol": ["BTC"] * 3, "price": [100, 101, 102]})
        document = encode(points, EncodeOptions(enable_differential=False, enable_repeat_markers=False))
        assert "#flags diff=0 repeat=0" in document.header
        assert "symbol:str:raw|price:num:raw" in document.header
        assert document.body == "BTC|100\nBTC|101\nBTC|102"

    def test_dict_options(self, make_points):
        points = make_points({"price": [100, 101, 102]})
        document = encode(points, {"enableDifferential": False})
        assert document.body == "100\n101\n102"

    def test_invalid_options_warn_and_use_defaults(self, make_points):
        points = make_points({"price": [100, 101, 102]})
        with pytest.warns(UserWarning, match="unknown encode option"):
            document = encode(points, {"bogus": True})
        assert document.body == "100\n+1\n+1"

    def test_non_dict_options_warn(self, make_points):
        with pytest.warns(UserWarning):
            encode(make_points({"v": [1]}), "fast")


class TestCompactness:

    def test_smaller_than_raw(self):
        points = generate_crypto_points(500)
        lean = encode(points)
        raw = encode(points, {"enable_differential": False, "enable_repeat_markers": False})
        assert lean.size < raw.size

    def test_per_row_cost_shrinks_with_repeats(self, make_points):
        """A constant field costs one character per row after the first."""
        document = encode(make_points({"status": ["online"] * 200}))
        assert document.body.count("online") == 1
        assert len(document.body) == len("online") + 199 * 2

    def test_linear_field_grows_slower_than_raw(self, make_points):
        """A field stepping by exactly 1 costs less per row than its raw digits."""
        ratios = []
        for n in (100, 1000):
            points = make_points({"seq": list(range(1_000_000, 1_000_000 + n))})
            lean = encode(points)
            raw = encode(points, {"enable_differential": False})
            assert lean.schema.fields[0].strategy is EncodingStrategy.DIFFERENTIAL
            assert raw.schema.fields[0].strategy is EncodingStrategy.RAW
            ratios.append(lean.size / raw.size)
        assert ratios[0] < 1.0
        assert ratios[1] < ratios[0]

    def test_deterministic(self):
        points = generate_crypto_points(50)
        assert encode(points).text == encode(points).text
