"""Line sources and byte sinks.

The parser consumes a complete list of lines, and the writer produces one
finished buffer. These two collaborators do the I/O on either side, so any
failure to read happens before the tree is touched and a write happens in a
single call.
"""

import io
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO, Iterator, List, NoReturn, Optional, TextIO, Union

from robust_datafile.shared import (
    ReaderConfig,
    SinkUnwritableError,
    SourceUnreadableError,
    WriterConfig,
    get_logger,
)

from .encoding import DecodedText, decode_bytes, strip_text_bom

PathLike = Union[str, Path]
InputType = Union[str, Path, bytes, bytearray, BinaryIO, TextIO]
OutputType = Union[str, Path, BinaryIO, TextIO]

_LINE_BREAK = re.compile(r"\r?\n")

logger = get_logger(__name__, component="character_stream")


def split_lines(text: str) -> List[str]:
    """Split ``text`` on ``\\n`` or ``\\r\\n``.

    A terminator at the very end does not produce an extra empty line, and
    empty text has no lines. Other characters that ``str.splitlines`` would
    treat as breaks stay part of the line.
    """
    if not text:
        return []
    lines = _LINE_BREAK.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def describe(target: Any) -> str:
    """Human readable name for a path or stream."""
    if isinstance(target, (str, Path)):
        return str(target)
    name = getattr(target, "name", None)
    if isinstance(name, str):
        return name
    return f"<{type(target).__name__}>"


@dataclass
class LineSource:
    """An ordered list of lines obtained from a backing source.

    Attributes:
        lines: Lines without terminators
        source: Description of the backing source
        encoding: Encoding the text was decoded with, if it was bytes
        bom_removed: True when a byte order mark was stripped
    """

    lines: List[str] = field(default_factory=list)
    source: Optional[str] = None
    encoding: Optional[str] = None
    bom_removed: bool = False

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    @classmethod
    def from_text(cls, text: str, source: Optional[str] = None,
                  config: Optional[ReaderConfig] = None) -> "LineSource":
        """Build a source from already-decoded text."""
        config = config or ReaderConfig()
        stripped = strip_text_bom(text) if config.strip_bom else text
        return cls(
            lines=split_lines(stripped),
            source=source,
            bom_removed=stripped is not text,
        )

    @classmethod
    def from_bytes(cls, data: bytes, source: Optional[str] = None,
                   config: Optional[ReaderConfig] = None) -> "LineSource":
        """Decode ``data`` and split it into lines.

        Raises:
            SourceUnreadableError: The data cannot be decoded
        """
        config = config or ReaderConfig()
        decoded = _decode(bytes(data), source, config)
        return cls(
            lines=split_lines(decoded.text),
            source=source,
            encoding=decoded.encoding.encoding,
            bom_removed=decoded.bom_removed,
        )

    @classmethod
    def from_path(cls, path: PathLike,
                  config: Optional[ReaderConfig] = None) -> "LineSource":
        """Read and decode the file at ``path``.

        Raises:
            SourceUnreadableError: The file is missing, is not a regular
                file, cannot be opened or cannot be decoded
        """
        file_path = Path(path)
        if not file_path.exists():
            _fail(f"File not found: {file_path}", file_path, "not_found")
        if not file_path.is_file():
            _fail(f"Not a regular file: {file_path}", file_path, "not_a_file")
        try:
            data = file_path.read_bytes()
        except PermissionError as e:
            _fail(f"Permission denied: {file_path}", file_path, "permission_denied", e)
        except OSError as e:
            _fail(f"Could not read {file_path}: {e}", file_path, "os_error", e)
        return cls.from_bytes(data, str(file_path), config)

    @classmethod
    def from_file(cls, file_obj: Union[BinaryIO, TextIO],
                  config: Optional[ReaderConfig] = None) -> "LineSource":
        """Read a binary or text file-like object to its end.

        Raises:
            SourceUnreadableError: Reading or decoding failed
        """
        name = describe(file_obj)
        try:
            content = file_obj.read()
        except UnicodeDecodeError as e:
            _fail(f"Could not decode {name}: {e}", name, "decode_error", e)
        except OSError as e:
            _fail(f"Could not read {name}: {e}", name, "os_error", e)
        if isinstance(content, (bytes, bytearray)):
            return cls.from_bytes(content, name, config)
        if isinstance(content, str):
            return cls.from_text(content, name, config)
        _fail(f"Stream {name} returned {type(content).__name__}", name, "bad_stream")

    @classmethod
    def open(cls, source: InputType,
             config: Optional[ReaderConfig] = None) -> "LineSource":
        """Dispatch on the type of ``source``.

        Strings are paths here; use :meth:`from_text` for document text.
        """
        if isinstance(source, (str, Path)):
            return cls.from_path(source, config)
        if isinstance(source, (bytes, bytearray)):
            return cls.from_bytes(bytes(source), "<bytes>", config)
        if hasattr(source, "read"):
            return cls.from_file(source, config)
        raise TypeError(f"Cannot read datafile from {type(source).__name__}")


@dataclass
class ByteSink:
    """Writes a finished buffer to a path or stream in one call."""

    destination: OutputType
    config: WriterConfig = field(default_factory=WriterConfig)

    @property
    def name(self) -> str:
        return describe(self.destination)

    def write(self, text: str) -> int:
        """Encode and write ``text``.

        Text streams receive ``text`` unencoded; paths and binary streams
        receive the encoded bytes.

        Returns:
            Number of bytes or characters written

        Raises:
            SinkUnwritableError: Encoding or writing failed
        """
        name = self.name
        try:
            if isinstance(self.destination, (str, Path)):
                data = text.encode(self.config.encoding)
                with open(self.destination, "wb") as handle:
                    handle.write(data)
                return len(data)
            if isinstance(self.destination, io.TextIOBase):
                self.destination.write(text)
                return len(text)
            data = text.encode(self.config.encoding)
            self.destination.write(data)
            return len(data)
        except (UnicodeEncodeError, LookupError) as e:
            reason = "encode_error"
            error: Exception = e
        except OSError as e:
            reason = "os_error"
            error = e
        logger.error(
            "Datafile could not be written",
            extra={"destination": name, "reason": reason, "error": str(error)},
        )
        raise SinkUnwritableError(
            f"Could not write {name}: {error}", destination=name, reason=reason
        ) from error


def _decode(data: bytes, source: Optional[str], config: ReaderConfig) -> DecodedText:
    try:
        return decode_bytes(data, config.encoding, config.errors, config.strip_bom)
    except UnicodeDecodeError as e:
        _fail(f"Could not decode {source or 'data'} as {config.encoding}: {e}",
              source, "decode_error", e)
    except LookupError as e:
        _fail(f"Unknown encoding {config.encoding!r}", source, "unknown_encoding", e)


def _fail(message: str, source: Any, reason: str,
          cause: Optional[BaseException] = None) -> NoReturn:
    """Log and raise SourceUnreadableError."""
    logger.error(
        "Datafile source unreadable",
        extra={"source": str(source) if source is not None else None, "reason": reason},
    )
    raise SourceUnreadableError(message, source=source, reason=reason) from cause
