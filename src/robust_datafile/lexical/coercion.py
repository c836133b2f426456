"""Scalar coercion between stored text and typed values.

Every value in a datafile is stored as text. The coercers in this module
interpret that text as text, integer or real, and turn typed values back
into text. Deserialization is total: malformed input degrades to the kind's
default (``""``, ``0`` or ``0.0``) instead of raising, so a caller cannot
tell an absent value from a malformed one.
"""

import math
import re
from enum import Enum
from typing import ClassVar, Dict, Optional, Union

Scalar = Union[str, int, float]

# Plain decimal literals only; Python extras such as "1_000" are rejected
_INTEGER_PATTERN = re.compile(r"[+-]?\d+")
_REAL_PATTERN = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


class ScalarKind(Enum):
    """Ways a stored value can be interpreted."""

    TEXT = "text"
    INTEGER = "integer"
    REAL = "real"


class ScalarCoercer:
    """Base class for the per-kind text conversions."""

    kind: ClassVar[ScalarKind]
    default: ClassVar[Scalar]

    def serialize(self, value: Scalar) -> str:
        raise NotImplementedError

    def deserialize(self, text: str) -> Scalar:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class TextCoercer(ScalarCoercer):
    """Identity conversion in both directions."""

    kind = ScalarKind.TEXT
    default = ""

    def serialize(self, value: Scalar) -> str:
        return str(value)

    def deserialize(self, text: str) -> str:
        return text


class RealCoercer(ScalarCoercer):
    """Real numbers with a comma-decimal fallback.

    Parsing tries ``.`` as decimal point, then the same text with ``,``
    replaced by ``.``, then gives ``0.0``. Serialization uses the shortest
    text that round-trips, without a trailing ``.0`` on integral values.
    """

    kind = ScalarKind.REAL
    default = 0.0

    def serialize(self, value: Scalar) -> str:
        text = repr(float(value))
        if text.endswith(".0"):
            text = text[:-2]
        return text

    def parse(self, text: str) -> Optional[float]:
        """Parse ``text`` as a real, returning None when it is not one."""
        for candidate in (text, text.replace(",", ".")):
            if _REAL_PATTERN.fullmatch(candidate):
                return float(candidate)
        return None

    def deserialize(self, text: str) -> float:
        value = self.parse(text)
        return self.default if value is None else value


class IntegerCoercer(ScalarCoercer):
    """Base-10 integers that accept reals by truncating toward zero."""

    kind = ScalarKind.INTEGER
    default = 0

    def __init__(self, real: Optional[RealCoercer] = None) -> None:
        self._real = real or RealCoercer()

    def serialize(self, value: Scalar) -> str:
        return str(int(value))

    def deserialize(self, text: str) -> int:
        if _INTEGER_PATTERN.fullmatch(text):
            return int(text)
        real = self._real.parse(text)
        if real is None or not math.isfinite(real):
            return self.default
        return int(real)


TEXT = TextCoercer()
REAL = RealCoercer()
INTEGER = IntegerCoercer(REAL)

COERCERS: Dict[ScalarKind, ScalarCoercer] = {
    ScalarKind.TEXT: TEXT,
    ScalarKind.INTEGER: INTEGER,
    ScalarKind.REAL: REAL,
}


def get_coercer(kind: Union[ScalarKind, str]) -> ScalarCoercer:
    """Return the coercer for ``kind`` (a ScalarKind or its name)."""
    if isinstance(kind, str):
        try:
            kind = ScalarKind(kind.lower())
        except ValueError:
            raise ValueError(
                f"Unknown scalar kind {kind!r}, expected one of "
                f"{[k.value for k in ScalarKind]}"
            ) from None
    return COERCERS[kind]


def kind_of(value: Scalar) -> ScalarKind:
    """Return the scalar kind matching the Python type of ``value``."""
    if isinstance(value, str):
        return ScalarKind.TEXT
    # bool is an int subclass and is stored as 0/1
    if isinstance(value, int):
        return ScalarKind.INTEGER
    if isinstance(value, float):
        return ScalarKind.REAL
    raise TypeError(f"Cannot store value of type {type(value).__name__}")


def serialize(value: Scalar) -> str:
    """Convert a text, integer or real value to its stored text."""
    return COERCERS[kind_of(value)].serialize(value)


def deserialize(text: str, kind: Union[ScalarKind, str] = ScalarKind.TEXT) -> Scalar:
    """Interpret stored text as ``kind``; never fails."""
    return get_coercer(kind).deserialize(text)


def serialize_text(value: str) -> str:
    return TEXT.serialize(value)


def deserialize_text(text: str) -> str:
    return TEXT.deserialize(text)


def serialize_integer(value: int) -> str:
    return INTEGER.serialize(value)


def deserialize_integer(text: str) -> int:
    return INTEGER.deserialize(text)


def serialize_real(value: float) -> str:
    return REAL.serialize(value)


def deserialize_real(text: str) -> float:
    return REAL.deserialize(text)
