"""Lexical layer: total conversions between stored text and typed scalars."""

from .coercion import (
    COERCERS,
    INTEGER,
    REAL,
    TEXT,
    IntegerCoercer,
    RealCoercer,
    Scalar,
    ScalarCoercer,
    ScalarKind,
    TextCoercer,
    deserialize,
    deserialize_integer,
    deserialize_real,
    deserialize_text,
    get_coercer,
    kind_of,
    serialize,
    serialize_integer,
    serialize_real,
    serialize_text,
)

__all__ = [
    "COERCERS",
    "INTEGER",
    "REAL",
    "TEXT",
    "IntegerCoercer",
    "RealCoercer",
    "Scalar",
    "ScalarCoercer",
    "ScalarKind",
    "TextCoercer",
    "deserialize",
    "deserialize_integer",
    "deserialize_real",
    "deserialize_text",
    "get_coercer",
    "kind_of",
    "serialize",
    "serialize_integer",
    "serialize_real",
    "serialize_text",
]
