"""Jinja2 filters for correspondence templates."""

from datetime import datetime


def format_date(value) -> str:
    """Format a datetime or ISO 8601 string as a readable date.

    Examples:
        >>> format_date("2026-01-29T06:51:50+00:00")
        'January 29, 2026'
        >>> format_date("")
        ''
    """
    if not value:
        return ""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return value
    return value.strftime("%B %d, %Y").replace(" 0", " ")


def humanize(value: str) -> str:
    """Turn a stored slug into words.

    Examples:
        >>> humanize("short-story")
        'short story'
        >>> humanize("visual_art")
        'visual art'
    """
    if not value:
        return ""
    return value.replace("-", " ").replace("_", " ")


FILTERS = {
    "format_date": format_date,
    "humanize": humanize,
}
