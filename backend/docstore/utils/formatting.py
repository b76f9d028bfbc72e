import math
from datetime import datetime, timezone

SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def format_file_size(num_bytes: int) -> str:
    """Human-readable size in base 1024 with at most two decimals, e.g. ``1.5 KB``."""
    if num_bytes <= 0:
        return "0 Bytes"
    i = 0
    while i < len(SIZE_UNITS) - 1 and num_bytes >= 1024 ** (i + 1):
        i += 1
    value = math.floor(num_bytes / 1024**i * 100 + 0.5) / 100
    return f"{value:g} {SIZE_UNITS[i]}"


def format_date(value: str) -> str:
    """Render a stored UTC timestamp in local time. Unparseable input is returned as-is."""
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return value
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone().strftime("%Y-%m-%d %H:%M:%S")
