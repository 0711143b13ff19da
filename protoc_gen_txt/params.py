"""Parser for the plugin parameter string.

protoc hands plugins a single string (``--txt_opt``/``--txt_out=PARAMS:dir``).
It is split into semicolon separated pairs of the form ``key`` or
``key=v1,v2,...``. Values may be double-quoted to embed ``;``, ``,``, ``=`` or
quotes; inside a quoted span a backslash escapes the next character.
"""

import ast
import re
from typing import Callable, Dict, List, Optional

from .errors import ParameterError
from .logging_config import get_logger

logger = get_logger(__name__)

# A single double-quoted literal with Go string escapes.
_QUOTED_LITERAL = re.compile(
    r'"(?:[^"\\\n]'
    r"|\\(?:[abfnrtv\\\"]|[0-3][0-7]{2}|x[0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|U[0-9a-fA-F]{8}))*\""
)


class Params(Dict[str, List[str]]):
    """Multi-valued parameter mapping with typed accessors."""

    def get_int(self, key: str, default: int = 0) -> int:
        """First value of ``key`` as an integer, or ``default``."""
        values = self.get(key)
        if not values:
            return default
        try:
            return int(values[0])
        except ValueError:
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        """First value of ``key`` as a boolean (``yes``/``true``), or ``default``."""
        values = self.get(key)
        if not values:
            return default
        return values[0].lower() in ("yes", "true")

    def get_str(self, key: str) -> str:
        """First value of ``key``, or an empty string."""
        values = self.get(key)
        if values:
            return values[0]
        return ""


def _quote_aware_splitter(*separators: str) -> Callable[[str], bool]:
    """Build a stateful predicate telling whether a character splits fields."""
    split_on = set(separators)
    state = {"quoted": False, "escape": False}

    def should_split(char: str) -> bool:
        if state["escape"]:
            state["escape"] = False
            return False

        if char == '"':
            state["quoted"] = not state["quoted"]

        if state["quoted"]:
            state["escape"] = char == "\\"
            return False

        return char in split_on

    return should_split


def split_fields(text: str, *separators: str) -> List[str]:
    """Split ``text`` on unquoted separators, dropping empty fields."""
    should_split = _quote_aware_splitter(*separators)
    fields: List[str] = []
    current: List[str] = []

    for char in text:
        if should_split(char):
            if current:
                fields.append("".join(current))
                current = []
            continue
        current.append(char)

    if current:
        fields.append("".join(current))
    return fields


def unquote(value: str) -> str:
    """Unquote a double-quoted value using string literal escapes.

    Raises:
        ParameterError: If the value is not a single well-formed literal.
    """
    if len(value) < 2 or not value.endswith('"'):
        raise ParameterError(f"unterminated quoted value: {value}")
    if not _QUOTED_LITERAL.fullmatch(value):
        raise ParameterError(f"malformed quoted value: {value}")
    try:
        result = ast.literal_eval(value)
    except (SyntaxError, ValueError) as e:
        raise ParameterError(f"malformed quoted value {value}: {e}") from e
    if not isinstance(result, str):
        raise ParameterError(f"malformed quoted value: {value}")
    return result


def _split_pair(pair: str) -> tuple[str, Optional[str]]:
    """Split a pair at its first unquoted ``=``."""
    should_split = _quote_aware_splitter("=")
    for index, char in enumerate(pair):
        if should_split(char):
            return pair[:index], pair[index + 1 :]
    return pair, None


def parse_parameters(text: str) -> Params:
    """Parse a plugin parameter string.

    Args:
        text: Raw parameter string from the request.

    Returns:
        Params mapping each key to its values in order of appearance.

    Raises:
        ParameterError: If a quoted value is unterminated or malformed.

    Examples:
        >>> parse_parameters('a=1,2;b;c="x;y"')
        {'a': ['1', '2'], 'b': [''], 'c': ['x;y']}
    """
    params = Params()
    for pair in split_fields(text or "", ";"):
        key, raw_values = _split_pair(pair)
        values = params.setdefault(key, [])

        fields = split_fields(raw_values, "=", ",") if raw_values else []
        if not fields:
            values.append("")
            continue

        for field in fields:
            if field.startswith('"'):
                field = unquote(field)
            values.append(field)

    logger.debug("Parsed parameters: %s", dict(params))
    return params
