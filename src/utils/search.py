"""Helpers for case-insensitive substring search with SQL LIKE."""

LIKE_ESCAPE = "\\"


def contains_pattern(text: str) -> str:
    """Build a LIKE pattern matching text literally anywhere in a column.

    Wildcards in the user's text are escaped so '%' and '_' match themselves.
    Use together with ``escape=LIKE_ESCAPE``.
    """
    escaped = (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"
