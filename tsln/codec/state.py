"""Running per-field state shared by the encoder and decoder loops."""

_NO_VALUE = object()


class RowState:
    """Previous value of every field for one encode or decode call.

    A fresh instance is created per call, so concurrent calls never share
    state.
    """

    def __init__(self, names):
        self._previous = {name: _NO_VALUE for name in names}
        self.previous_ms = None

    def has_previous(self, name: str) -> bool:
        return self._previous[name] is not _NO_VALUE

    def previous(self, name: str):
        return self._previous[name]

    def update(self, name: str, value) -> None:
        self._previous[name] = value
