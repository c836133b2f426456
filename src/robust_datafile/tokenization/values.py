"""Splitting the right-hand side of an assignment into values."""

from typing import List

QUOTE = '"'


def split_values(raw_value: str, separator: str = ",") -> List[str]:
    """Split ``raw_value`` into trimmed values.

    A double quote toggles quoted mode and is dropped from the output. Inside
    quotes the separator is ordinary text. Outside quotes it ends the current
    value, even when that value is empty, so ``a,,b`` gives three values. The
    text after the last separator is kept only if it is non-empty before
    trimming; ``a, `` gives ``["a", ""]`` but ``a,`` gives ``["a"]``.

    Quotes are not escapable and an unterminated quote simply runs to the end
    of the line.

    Args:
        raw_value: Text after the first ``=``, untrimmed
        separator: Single-character list separator

    Returns:
        List of values in order
    """
    values: List[str] = []
    buffer: List[str] = []
    quoted = False

    for char in raw_value:
        if char == QUOTE:
            quoted = not quoted
        elif char == separator and not quoted:
            values.append("".join(buffer).strip())
            buffer.clear()
        else:
            buffer.append(char)

    if buffer:
        values.append("".join(buffer).strip())
    return values


def needs_quoting(value: str, separator: str = ",") -> bool:
    """Check whether ``value`` must be quoted to survive :func:`split_values`."""
    return separator in value


def quote_value(value: str, separator: str = ",") -> str:
    """Quote ``value`` when it contains the separator, else return it as is."""
    if needs_quoting(value, separator):
        return f"{QUOTE}{value}{QUOTE}"
    return value
