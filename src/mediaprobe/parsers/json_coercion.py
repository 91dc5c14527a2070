"""Restore scalar types in ffprobe JSON output.

ffprobe's JSON writer emits most scalars as strings (``"duration": "241.963"``,
``"avg_frame_rate": "30000/1001"``). :func:`coerce` walks a decoded JSON tree
and reinterprets string leaves as booleans, integers, floats, or
:class:`~fractions.Fraction` values so that downstream code can do arithmetic
without per-field parsing.

Recognizers are tried in a fixed order and the first match wins:

1. ``true`` / ``false``
2. integer literal (``42``, ``-7``, ``1_000``), any number of digits
3. float literal (``3.5``, ``.5``, ``1e-3``, ``2_500.0``)
4. rational literal (``30000/1001``); a zero denominator yields ``0``
5. anything else is returned unchanged

Integers must be tried before floats because every integer literal is also
a valid float literal.
"""

import math
import re
from fractions import Fraction
from typing import Any, Callable, List, Tuple, Union

from ..core.exceptions import MalformedLiteralError

# Digit run with optional single underscores between groups: 1_000_000
_DIGITS = r"\d+(?:_\d+)*"

_TRUE_RE = re.compile(r"\s*true\s*")
_FALSE_RE = re.compile(r"\s*false\s*")
_INTEGER_RE = re.compile(rf"\s*[+-]?{_DIGITS}\s*")
_FLOAT_RE = re.compile(
    rf"\s*[+-]?(?:{_DIGITS}(?:\.{_DIGITS})?|\.{_DIGITS})(?:[eE][+-]?{_DIGITS})?\s*"
)
_RATIONAL_RE = re.compile(rf"\s*([+-]?{_DIGITS})/([+-]?{_DIGITS})\s*")


# int(str) refuses more than sys.get_int_max_str_digits() digits (4300 by default)
_CHUNK_DIGITS = 1000


def _to_integer(text: str) -> int:
    """Convert a signed decimal literal of any length to int."""
    digits = text.strip().replace("_", "")
    sign = -1 if digits.startswith("-") else 1
    digits = digits.lstrip("+-")
    result = 0
    for start in range(0, len(digits), _CHUNK_DIGITS):
        chunk = digits[start : start + _CHUNK_DIGITS]
        result = result * 10 ** len(chunk) + int(chunk)
    return sign * result


def _to_float(text: str) -> float:
    result = float(text.strip().replace("_", ""))
    if math.isinf(result):
        raise MalformedLiteralError(f"Float literal out of range: {text!r}", value=text)
    return result


def _to_rational(text: str) -> Union[Fraction, int]:
    match = _RATIONAL_RE.fullmatch(text)
    numerator = _to_integer(match.group(1))
    denominator = _to_integer(match.group(2))
    if denominator == 0:
        return 0
    return Fraction(numerator, denominator)


Recognizer = Tuple[re.Pattern, Callable[[str], Any]]

# Order is significant, see module docstring.
RECOGNIZERS: List[Recognizer] = [
    (_TRUE_RE, lambda text: True),
    (_FALSE_RE, lambda text: False),
    (_INTEGER_RE, _to_integer),
    (_FLOAT_RE, _to_float),
    (_RATIONAL_RE, _to_rational),
]


def coerce_string(text: str) -> Any:
    """
    Convert a single string scalar to its logical type.

    Args:
        text: String value from ffprobe JSON output

    Returns:
        bool, int, float, Fraction, or the original string when no
        literal grammar matches

    Raises:
        MalformedLiteralError: If the string matches a literal grammar but
            cannot be represented (e.g. a float that overflows)

    Example:
        >>> coerce_string("1_000")
        1000
        >>> coerce_string("30000/1001")
        Fraction(30000, 1001)
        >>> coerce_string("0/0")
        0
        >>> coerce_string("16:9")
        '16:9'
    """
    for pattern, convert in RECOGNIZERS:
        if pattern.fullmatch(text):
            try:
                return convert(text)
            except ValueError as e:
                raise MalformedLiteralError(
                    f"Failed to convert literal {text!r}: {e}", value=text
                ) from e
    return text


def coerce(value: Any) -> Any:
    """
    Walk a decoded JSON value and coerce every string leaf.

    Mappings keep their keys and sequences keep their length and order;
    only string leaves are replaced. Booleans, numbers and None pass
    through unchanged, so coercing an already-typed tree is a no-op.

    Args:
        value: Value produced by a JSON decoder

    Returns:
        Tree of the same shape with typed scalars

    Example:
        >>> coerce({"streams": [{"width": "1920", "sample_rate": "48000"}]})
        {'streams': [{'width': 1920, 'sample_rate': 48000}]}
    """
    if isinstance(value, dict):
        return {key: coerce(item) for key, item in value.items()}
    if isinstance(value, list):
        return [coerce(item) for item in value]
    if isinstance(value, str):
        return coerce_string(value)
    return value
