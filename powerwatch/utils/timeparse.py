import re

_UNITS = {
    "ms": 0.001,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")


def parse_duration(time_str: str) -> float:
    """
    Parse a duration string like '500ms', '30s', '5m' or '1h30m' into seconds.
    """
    if not isinstance(time_str, str):
        raise ValueError("Invalid time string format")

    text = time_str.strip()
    if not text:
        raise ValueError("Invalid time string format")

    total = 0.0
    pos = 0
    for match in _PART.finditer(text):
        if match.start() != pos:
            raise ValueError(f"Invalid time string format: {time_str!r}")
        value, unit = match.groups()
        total += float(value) * _UNITS[unit]
        pos = match.end()

    if pos != len(text):
        raise ValueError(f"Invalid time string format: {time_str!r}")

    return total


def format_duration(seconds: float) -> str:
    """Render seconds back into the shortest 'XhYmZs' form."""
    if seconds < 1:
        return f"{int(round(seconds * 1000))}ms"

    if seconds < 60 and seconds != int(seconds):
        return f"{seconds:g}s"

    whole = int(seconds)
    hours, rest = divmod(whole, 3600)
    minutes, secs = divmod(rest, 60)
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs or not parts:
        parts.append(f"{secs}s")
    return "".join(parts)
