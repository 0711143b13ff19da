"""
Case conversion for generated identifiers.

Converts names between camelCase, PascalCase and snake_case one character
at a time. Only ``_``, ``-`` and space separate words.
"""

SEPARATORS = frozenset("_- ")


def _upper(char: str) -> str:
    converted = char.upper()
    return converted if len(converted) == 1 else char


def _lower(char: str) -> str:
    converted = char.lower()
    return converted if len(converted) == 1 else char


def _join_words(name: str, capitalize_first: bool) -> str:
    out = []
    boundary = False

    for index, char in enumerate(name):
        if char in SEPARATORS:
            boundary = bool(out)
            continue

        previous = name[index - 1] if index > 0 else ""
        following = name[index + 1] if index + 1 < len(name) else ""

        if not out:
            out.append(_upper(char) if capitalize_first else _lower(char))
        elif boundary:
            out.append(_upper(char))
        # acronym runs are lowered: HTTPServer -> httpServer
        elif char.isupper() and (
            out[-1].isupper() or not previous.isupper() or following.islower()
        ):
            out.append(char)
        else:
            out.append(_lower(char))
        boundary = False

    return "".join(out)


def to_camel_case(name: str) -> str:
    """Convert to camelCase (``foo-bar baz`` -> ``fooBarBaz``)."""
    return _join_words(name, capitalize_first=False)


def to_pascal_case(name: str) -> str:
    """Convert to PascalCase (``foo_bar`` -> ``FooBar``)."""
    return _join_words(name, capitalize_first=True)


def to_snake_case(name: str, sep: str = "_") -> str:
    """
    Convert to snake_case using ``sep`` between words.

    A separator is inserted before an upper-case letter that follows a
    lower-case one, and before the last capital of an acronym run when a
    lower-case letter follows (``FOOBar`` -> ``foo_bar``). Explicit
    separators only produce ``sep`` when a letter precedes them, so runs of
    them collapse.

    Args:
        name: Name to convert
        sep: Word separator to insert

    Returns:
        Lower-cased name with separators
    """
    out = []
    previous = ""
    last_letter = False

    for index, char in enumerate(name):
        if char in SEPARATORS:
            if last_letter:
                out.append(sep)
            last_letter = False
            previous = char
            continue

        if char.isupper():
            following = name[index + 1] if index + 1 < len(name) else ""
            if previous.islower():
                out.append(sep)
            elif previous.isupper() and following.islower():
                out.append(sep)
            out.append(_lower(char))
        else:
            out.append(char)

        last_letter = char.isalpha()
        previous = char

    return "".join(out)

