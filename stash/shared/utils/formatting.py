"""Human-readable formatting helpers."""

_UNITS = ["Bytes", "KB", "MB", "GB", "TB", "PB"]


def format_bytes(size: int, decimals: int = 2) -> str:
    """Format a byte count with a binary unit, e.g. 1536 -> '1.5 KB'."""
    if size <= 0:
        return "0 Bytes"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_UNITS) - 1:
        value /= 1024
        unit += 1
    text = f"{value:.{decimals}f}".rstrip("0").rstrip(".")
    return f"{text} {_UNITS[unit]}"
