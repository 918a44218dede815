"""Scalar parsing shared by the compact and archive readers."""

import math
import re

from ghx_engine._errors import NumberParseError
from ghx_engine._value import Boolean, Number, Point, Text, Value, Vector

_PREAMBLE = re.compile(r"^\s*<\?xml[^>]*\?>", re.IGNORECASE)


def strip_preamble(text: str) -> str:
    """Remove a leading BOM, surrounding whitespace and the ``<?xml ?>`` declaration."""
    text = text.removeprefix("\ufeff").strip()
    return _PREAMBLE.sub("", text, count=1).strip()


def parse_number(text: str, context: str = "", *, decimal_comma: bool = False) -> float:
    """Parse a float; with ``decimal_comma`` a ``,`` is read as the decimal separator.

    Raises:
        NumberParseError: If the text is not a number or is NaN.

    """
    candidate = text.strip()
    if decimal_comma:
        candidate = candidate.replace(",", ".")
    # float() also reads digit separators; document numbers never carry them.
    if "_" in candidate:
        raise NumberParseError(text, context)
    try:
        number = float(candidate)
    except ValueError:
        raise NumberParseError(text, context) from None
    if math.isnan(number):
        raise NumberParseError(text, context)
    return number


def try_number(text: str, *, decimal_comma: bool = False) -> float | None:
    try:
        return parse_number(text, decimal_comma=decimal_comma)
    except NumberParseError:
        return None


def parse_flag(text: str) -> bool | None:
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def parse_triple(text: str, context: str = "", *, decimal_comma: bool = False) -> tuple[float, float, float]:
    """Parse three coordinates.

    Coordinates are separated by ``;`` when present (so ``,`` can be a
    decimal separator), otherwise by ``,`` or whitespace. Surrounding
    brackets are ignored.

    Raises:
        NumberParseError: If there are not exactly three numeric parts.

    """
    body = text.strip().strip("()[]{}")
    if ";" in body:
        parts = body.split(";")
    else:
        parts = re.split(r"[,\s]+", body.strip())
        decimal_comma = False
    if len(parts) != 3:  # noqa: PLR2004
        raise NumberParseError(text, context)
    x, y, z = (parse_number(part, context, decimal_comma=decimal_comma) for part in parts)
    return (x, y, z)


def infer_value(text: str, type_name: str | None = None, *, decimal_comma: bool = False) -> Value:
    """Interpret literal text as a value.

    A ``type_name`` hint selects the kind: contains ``point`` gives a Point,
    ``vector`` a Vector, ``double``/``single``/``int``/``number`` a Number,
    ``bool`` a Boolean and anything else Text. Without a hint the text is
    tried as a number, then as ``true``/``false``, and kept as Text
    otherwise.

    Raises:
        NumberParseError: If the hint asks for a number or point and the
            text does not parse.

    """
    if type_name is not None:
        hint = type_name.lower()
        if "point" in hint:
            return Point(*parse_triple(text, type_name, decimal_comma=decimal_comma))
        if "vector" in hint:
            return Vector(*parse_triple(text, type_name, decimal_comma=decimal_comma))
        if any(word in hint for word in ("double", "single", "int", "number")):
            return Number(parse_number(text, type_name, decimal_comma=decimal_comma))
        if "bool" in hint:
            flag = parse_flag(text)
            if flag is None:
                number = parse_number(text, type_name, decimal_comma=decimal_comma)
                return Boolean(number != 0)
            return Boolean(flag)
        return Text(text)

    number = try_number(text, decimal_comma=decimal_comma)
    if number is not None:
        return Number(number)
    flag = parse_flag(text)
    if flag is not None:
        return Boolean(flag)
    return Text(text)
