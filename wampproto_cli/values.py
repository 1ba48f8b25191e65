"""Typed conversion of command-line string tokens.

Every token converts; the first parse that succeeds wins, in this order:
integer, float, boolean, null, and finally the untouched string.
"""

from __future__ import annotations

import enum
import math
import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from .cli_shared import UsageError

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.[0-9]*|\.[0-9]+|[0-9]+(?=[eE]))(?:[eE][+-]?[0-9]+)?")

TRUE_LITERALS = frozenset(("true", "True", "TRUE"))
FALSE_LITERALS = frozenset(("false", "False", "FALSE"))
NULL_LITERAL = "null"

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ValueKind(enum.Enum):
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    NULL = "null"
    STRING = "string"


@dataclass(frozen=True)
class TypedValue:
    kind: ValueKind
    value: int | float | bool | str | None


def _int64(token: str) -> int | None:
    try:
        number = int(token)
    except ValueError:
        # int() refuses strings past sys.get_int_max_str_digits().
        return None
    if INT64_MIN <= number <= INT64_MAX:
        return number
    return None


def convert(token: str) -> TypedValue:
    # Out-of-range numbers fall through: a too-large integer may still be a
    # finite float, and anything non-finite ends up a string.
    integral = _INT_RE.fullmatch(token) is not None
    number = _int64(token) if integral else None
    if number is not None:
        return TypedValue(ValueKind.INTEGER, number)
    if integral or _FLOAT_RE.fullmatch(token):
        real = float(token)
        if math.isfinite(real):
            return TypedValue(ValueKind.FLOAT, real)
    if token in TRUE_LITERALS:
        return TypedValue(ValueKind.BOOLEAN, True)
    if token in FALSE_LITERALS:
        return TypedValue(ValueKind.BOOLEAN, False)
    if token == NULL_LITERAL:
        return TypedValue(ValueKind.NULL, None)
    return TypedValue(ValueKind.STRING, token)


def convert_list(tokens: Iterable[str] | None) -> list[TypedValue]:
    return [convert(t) for t in (tokens or ())]


def convert_map(pairs: Mapping[str, str] | None) -> dict[str, TypedValue]:
    return {k: convert(v) for k, v in (pairs or {}).items()}


def args_kwargs_or_none(
    args: list[TypedValue], kwargs: dict[str, TypedValue]
) -> tuple[list[TypedValue] | None, dict[str, TypedValue] | None]:
    """Collapse args/kwargs to ``(None, None)`` when the caller supplied neither.

    If either side carries a value both are passed through unchanged, so an
    empty args list still precedes a non-empty kwargs map on the wire.
    """

    if not args and not kwargs:
        return None, None
    return args, kwargs


def parse_key_values(raw: Iterable[str] | None, *, flag: str) -> dict[str, str]:
    out: dict[str, str] = {}
    for item in raw or ():
        key, sep, value = item.partition("=")
        if not sep:
            raise UsageError(f"{flag}: expected KEY=VALUE got {item!r}")
        out[key] = value
    return out


def to_native(value: Any) -> Any:
    if isinstance(value, TypedValue):
        return value.value
    if isinstance(value, dict):
        return {k: to_native(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_native(v) for v in value]
    return value
