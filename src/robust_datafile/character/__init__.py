"""Character layer: decoding sources into lines and writing buffers out.

Key Components:
    LineSource: Complete, ordered lines from a path, bytes, text or stream
    ByteSink: One-call write of a finished buffer to a path or stream
    BOMDetector: Byte order mark detection used while decoding
"""

from .encoding import (
    BOMDetector,
    DecodedText,
    DetectionMethod,
    EncodingResult,
    decode_bytes,
    strip_text_bom,
)
from .stream import ByteSink, LineSource, describe, split_lines

__all__ = [
    "BOMDetector",
    "ByteSink",
    "DecodedText",
    "DetectionMethod",
    "EncodingResult",
    "LineSource",
    "decode_bytes",
    "describe",
    "split_lines",
    "strip_text_bom",
]
