"""
Utility functions for case conversion of type and field names.
"""

import re

# One word: an acronym, a (capitalized) lowercase run, or a number
_WORD_PATTERN = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")


def split_words(text: str) -> list[str]:
    """Split snake_case, camelCase, kebab-case or spaced text into lowercase words.

    Examples:
        "first_name" -> ["first", "name"]
        "HTTPServer" -> ["http", "server"]
        "first 3 rows" -> ["first", "3", "rows"]
    """
    return [word.lower() for word in _WORD_PATTERN.findall(text)]


def snake_to_pascal_case(text: str) -> str:
    """Convert snake_case, camelCase, or space-separated text to PascalCase.

    Examples:
        "first_name" -> "FirstName"
        "FIRST_NAME" -> "FirstName"
        "actionTemplate" -> "ActionTemplate"
        "first 3 rows" -> "First3Rows"
        "ABC" -> "Abc"
    """
    return "".join(word.capitalize() for word in split_words(text))


def snake_to_camel_case(text: str) -> str:
    """Convert text to camelCase, e.g. "first_name" -> "firstName"."""
    pascal = snake_to_pascal_case(text)
    return pascal[:1].lower() + pascal[1:]


def to_snake_case(text: str) -> str:
    """Convert text to snake_case, e.g. "firstName" -> "first_name"."""
    return "_".join(split_words(text))


def to_kebab_case(text: str) -> str:
    return "-".join(split_words(text))


# Field rename rules, named after the casing they produce
RENAME_RULES = {
    "lowercase": lambda text: text.lower(),
    "UPPERCASE": lambda text: text.upper(),
    "PascalCase": snake_to_pascal_case,
    "camelCase": snake_to_camel_case,
    "snake_case": to_snake_case,
    "SCREAMING_SNAKE_CASE": lambda text: to_snake_case(text).upper(),
    "kebab-case": to_kebab_case,
    "SCREAMING-KEBAB-CASE": lambda text: to_kebab_case(text).upper(),
}


def apply_rename_rule(text: str, rule: str | None) -> str:
    """Rename text according to one of RENAME_RULES, or return it unchanged."""
    if rule is None:
        return text
    try:
        return RENAME_RULES[rule](text)
    except KeyError:
        raise ValueError(f"Unknown rename rule {rule!r}, expected one of {', '.join(RENAME_RULES)}") from None
