"""Byte decoding for datafile sources.

Datafiles are UTF-8 by default. A byte order mark at the start of the data
overrides the configured encoding and is removed before the text reaches the
parser, so that it does not end up in the name of the first node.
"""

import codecs
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Optional

TEXT_BOM = "\ufeff"


class DetectionMethod(Enum):
    """How the decoding encoding was chosen."""

    BOM = "bom"
    CONFIGURED = "configured"


@dataclass
class EncodingResult:
    """Encoding chosen for a byte source.

    Attributes:
        encoding: Codec name used for decoding
        method: Whether a BOM or the configuration decided
        bom_length: Number of BOM bytes at the start of the data
    """

    encoding: str
    method: DetectionMethod
    bom_length: int = 0


@dataclass
class DecodedText:
    """Decoded text plus the encoding decision behind it."""

    text: str
    encoding: EncodingResult
    bom_removed: bool = False


class BOMDetector:
    """Byte Order Mark (BOM) detection for the Unicode encodings."""

    BOM_PATTERNS: ClassVar[Dict[bytes, str]] = {
        codecs.BOM_UTF8: "utf-8",
        codecs.BOM_UTF16_LE: "utf-16-le",
        codecs.BOM_UTF16_BE: "utf-16-be",
        codecs.BOM_UTF32_LE: "utf-32-le",
        codecs.BOM_UTF32_BE: "utf-32-be",
    }

    def detect(self, data: bytes) -> Optional[EncodingResult]:
        """Detect encoding based on BOM.

        Args:
            data: Byte data to analyze

        Returns:
            EncodingResult if BOM detected, None otherwise
        """
        if not data:
            return None

        # UTF-32 LE starts with the UTF-16 LE mark, so try longer marks first
        for bom_bytes, encoding in sorted(
            self.BOM_PATTERNS.items(), key=lambda item: len(item[0]), reverse=True
        ):
            if data.startswith(bom_bytes):
                return EncodingResult(
                    encoding=encoding,
                    method=DetectionMethod.BOM,
                    bom_length=len(bom_bytes),
                )
        return None


def decode_bytes(
    data: bytes,
    encoding: str = "utf-8",
    errors: str = "strict",
    strip_bom: bool = True,
) -> DecodedText:
    """Decode ``data``, honouring and removing a leading BOM.

    Raises:
        UnicodeDecodeError: The data is not valid in the chosen encoding and
            ``errors`` is ``"strict"``
        LookupError: ``encoding`` is not a known codec
    """
    detected = BOMDetector().detect(data) if strip_bom else None
    if detected is None:
        codecs.lookup(encoding)
        chosen = EncodingResult(encoding=encoding, method=DetectionMethod.CONFIGURED)
        return DecodedText(text=data.decode(encoding, errors), encoding=chosen)

    text = data[detected.bom_length:].decode(detected.encoding, errors)
    return DecodedText(text=text, encoding=detected, bom_removed=True)


def strip_text_bom(text: str) -> str:
    """Remove a BOM character left at the start of already-decoded text."""
    if text.startswith(TEXT_BOM):
        return text[len(TEXT_BOM):]
    return text
