"""Derivation of human readable names from Python identifiers."""

import re

__all__ = ["humanize"]

_SEPARATORS = re.compile(r"[_\-\s]+")
_WORDS = re.compile(r"[A-Z]+(?=[A-Z][a-z]|[0-9]|\b)|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")


def humanize(identifier: str) -> str:
    """Turn an identifier into a title-cased phrase.

    Snake case, kebab case and camel case are all split into words. Runs of
    capitals are kept together as acronyms.

    Example:
        >>> humanize("order_processor")  # Returns "Order Processor"
        >>> humanize("orderProcessor")   # Returns "Order Processor"
        >>> humanize("HTTPClient")       # Returns "HTTP Client"
        >>> humanize("_private")         # Returns "Private"
    """
    words = [
        word
        for part in _SEPARATORS.split(identifier)
        for word in _WORDS.findall(part)
    ]
    return " ".join(_title(word) for word in words)


def _title(word: str) -> str:
    if word.isupper():
        return word
    return word[0].upper() + word[1:]
