"""Rich CLI formatting helpers for TSLN commands."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

console = Console()


def print_header(title: str):
    """Print a styled section header."""
    console.print(Panel(Text(title, style="bold cyan"), border_style="dim"))


def print_encode_results(n_points: int, statistics, output: str):
    """Print encode results as a rich table."""
    table = Table(title="Encode Results", border_style="cyan", show_header=False, padding=(0, 2))
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="bold")
    table.add_row("Points", str(n_points))
    table.add_row("JSON size", f"{statistics.original_size:,} bytes")
    table.add_row("TSLN size", f"{statistics.encoded_size:,} bytes")
    table.add_row("Ratio", f"[green]{statistics.compression_ratio:.0%}[/green]")
    table.add_row("Tokens (est.)", f"{statistics.original_tokens:,} -> {statistics.estimated_tokens:,}")
    table.add_row("Token savings", f"{statistics.token_savings_percent:.1f}%")
    table.add_row("Output", output)
    console.print(table)


def print_decode_results(n_points: int, n_fields: int, output: str):
    """Print decode results."""
    table = Table(title="Decode Results", border_style="cyan", show_header=False, padding=(0, 2))
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="bold")
    table.add_row("Points", str(n_points))
    table.add_row("Fields", str(n_fields))
    table.add_row("Output", output)
    console.print(table)


def print_analysis(analysis):
    """Print per-field profiles and the chosen strategies."""
    table = Table(title="Field Analysis", border_style="cyan", padding=(0, 2))
    table.add_column("Field", style="bold")
    table.add_column("Type")
    table.add_column("Unique", justify="right")
    table.add_column("Repeat", justify="right")
    table.add_column("Volatility", justify="right")
    table.add_column("Trend")
    table.add_column("Strategy", style="green")

    for name, profile in analysis.profiles.items():
        volatility = "-" if profile.volatility is None else f"{profile.volatility:.3f}"
        trend = "-" if profile.trend is None else profile.trend.value
        table.add_row(
            name,
            profile.type.value,
            f"{profile.unique_count} / {profile.total_count}",
            f"{profile.repeat_rate:.0%}",
            volatility,
            trend,
            analysis.strategies[name].value,
        )
    console.print(table)

    interval = analysis.timestamp_interval
    regular = "yes" if analysis.is_regular_interval else "no"
    if interval is not None:
        regular += f" ({interval} ms)"
    console.print(f"  Regular interval:      {regular}")
    console.print(f"  Dataset volatility:    {analysis.dataset_volatility:.3f}")
    console.print(f"  Compression potential: {analysis.compression_potential:.3f}")


def print_comparison(comparison):
    """Print a format comparison table, best format first."""
    table = Table(title="Format Comparison (estimated tokens)", border_style="cyan", padding=(0, 2))
    table.add_column("Format", style="bold")
    table.add_column("Size", justify="right")
    table.add_column("Tokens", justify="right")
    table.add_column("vs JSON", justify="right", style="green")

    baseline = comparison["json"].tokens
    ranked = sorted(comparison.formats.items(), key=lambda item: item[1].tokens)
    for name, metrics in ranked:
        relative = f"{metrics.tokens / baseline:.0%}" if baseline else "-"
        label = name.upper()
        if name == comparison.best_format:
            label += " *"
        table.add_row(label, f"{metrics.size:,} bytes", f"{metrics.tokens:,}", relative)
    console.print(table)
    console.print(f"  Best format: [bold]{comparison.best_format.upper()}[/bold]")
    console.print(f"  TSLN savings vs JSON: {comparison.savings:.1f}%")
