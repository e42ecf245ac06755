"""
Small text helpers used when rendering generated files.
"""
from typing import Iterable, Optional


def inline_code(text: str) -> str:
    """
    Wraps text in Markdown inline-code backticks.

    :param text: The text to quote.
    :return: The quoted text, e.g. ``27.1`` -> ```27.1```.
    """
    return f"`{text}`"


def configure_suffix(flags: Optional[str]) -> str:
    """
    Formats extra configure flags for appending to a ``./configure`` call.

    :param flags: The flags, or None when there are none.
    :return: An empty string, or the flags preceded by a single space.
    """
    if not flags:
        return ""
    return f" {flags}"


def join_quoted(items: Iterable[str], separator: str = ", ") -> str:
    """
    Quotes each item as inline code and joins them.
    """
    return separator.join(inline_code(item) for item in items)
