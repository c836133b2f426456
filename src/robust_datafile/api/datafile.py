"""Public reading and writing API with progressive disclosure.

Level 1 mirrors the :mod:`json` module::

    >>> root = loads("player\\n{\\n\\tname = Javid\\n}\\n")
    >>> root["player"]["name"].get_text()
    'Javid'
    >>> dumps(root)
    'player\\n{\\n\\tname = Javid\\n}\\n'

Level 2 returns a :class:`ParseResult` with diagnostics (:func:`parse`,
:func:`parse_file`, :func:`load_into`). Level 3 is the reusable
:class:`DatafileProcessor`.
"""

import time
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, TextIO, Union

from robust_datafile.character import ByteSink, LineSource
from robust_datafile.serialization import DatafileWriter
from robust_datafile.shared import DatafileConfig, get_logger
from robust_datafile.tree import DatafileTreeBuilder, Node, ParseResult

# Type definitions for input and output
InputType = Union[str, Path, bytes, BinaryIO, TextIO]
OutputType = Union[str, Path, BinaryIO, TextIO]

MS_PER_SECOND = 1000


def _build(
    source: LineSource,
    root: Optional[Node],
    config: Optional[DatafileConfig],
    correlation_id: Optional[str],
) -> ParseResult:
    builder = DatafileTreeBuilder(correlation_id=correlation_id, config=config)
    return builder.build(source.lines, root=root, source=source.source)


def parse(
    text: Union[str, bytes],
    root: Optional[Node] = None,
    config: Optional[DatafileConfig] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Parse datafile text.

    Args:
        text: Document text, or encoded bytes decoded per ``config.reader``
        root: Node to populate; a new root is created from ``config`` if omitted
        config: Configuration (defaults to canonical)
        correlation_id: Optional correlation ID for request tracking

    Returns:
        ParseResult with the populated root and diagnostics

    Examples:
        >>> result = parse("a = 1\\n}\\nb = 2")
        >>> result.root.has_child("b")
        False
        >>> result.has_warnings()
        True
    """
    config = config or DatafileConfig()
    if isinstance(text, (bytes, bytearray)):
        source = LineSource.from_bytes(bytes(text), "<bytes>", config.reader)
    else:
        source = LineSource.from_text(text, "<string>", config.reader)
    return _build(source, root, config, correlation_id)


def parse_file(
    file_path: Union[str, Path],
    root: Optional[Node] = None,
    config: Optional[DatafileConfig] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Parse the datafile at ``file_path``.

    Raises:
        SourceUnreadableError: The file could not be read or decoded
    """
    config = config or DatafileConfig()
    source = LineSource.from_path(file_path, config.reader)
    return _build(source, root, config, correlation_id)


def load_into(
    root: Node,
    source: InputType,
    config: Optional[DatafileConfig] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Populate an existing root from a path, bytes or file-like object.

    All lines are read before ``root`` is touched, so a read failure leaves
    it unchanged.

    Raises:
        SourceUnreadableError: The source could not be read or decoded
    """
    config = config or DatafileConfig()
    lines = LineSource.open(source, config.reader)
    return _build(lines, root, config, correlation_id)


def loads(text: Union[str, bytes], config: Optional[DatafileConfig] = None) -> Node:
    """Parse datafile text and return the root node."""
    return parse(text, config=config).root


def load(source: InputType, config: Optional[DatafileConfig] = None) -> Node:
    """Read a datafile from a path, bytes or file-like object.

    Raises:
        SourceUnreadableError: The source could not be read or decoded
    """
    config = config or DatafileConfig()
    return load_into(config.create_root(), source, config).root


def dumps(node: Node, config: Optional[DatafileConfig] = None) -> str:
    """Serialize ``node`` to datafile text."""
    return DatafileWriter(config=config).serialize(node)


def dump(
    node: Node,
    destination: OutputType,
    config: Optional[DatafileConfig] = None,
) -> None:
    """Serialize ``node`` and write it to a path or file-like object.

    Raises:
        SinkUnwritableError: The destination could not be written
    """
    config = config or DatafileConfig()
    ByteSink(destination, config.writer).write(dumps(node, config))


class DatafileProcessor:
    """Reusable reader and writer with shared configuration and statistics.

    Attributes:
        config: Current configuration
        correlation_id: Correlation ID for request tracking

    Examples:
        >>> processor = DatafileProcessor(DatafileConfig.space_indented(2))
        >>> result = processor.read_text("a\\n{\\nb = 1\\n}")
        >>> processor.serialize(result.root)
        'a\\n{\\n  b = 1\\n}\\n'
    """

    def __init__(
        self,
        config: Optional[DatafileConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize processor.

        Args:
            config: Configuration (defaults to canonical)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or DatafileConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "datafile_processor")

        self._builder = DatafileTreeBuilder(self.correlation_id, self.config)
        self._writer = DatafileWriter(self.correlation_id, self.config)

        self._read_count = 0
        self._write_count = 0
        self._diagnostic_count = 0
        self._total_read_time = 0.0
        self._total_write_time = 0.0

        self.logger.info(
            "DatafileProcessor initialized",
            extra={"config_name": self.config.name},
        )

    def _record_read(self, result: ParseResult, start_time: float) -> ParseResult:
        self._read_count += 1
        self._diagnostic_count += len(result.diagnostics)
        self._total_read_time += (time.perf_counter() - start_time) * MS_PER_SECOND
        return result

    def read(self, source: InputType, root: Optional[Node] = None) -> ParseResult:
        """Read a path, bytes or file-like object into ``root`` or a new root.

        Raises:
            SourceUnreadableError: The source could not be read or decoded
        """
        start_time = time.perf_counter()
        lines = LineSource.open(source, self.config.reader)
        result = self._builder.build(lines.lines, root=root, source=lines.source)
        return self._record_read(result, start_time)

    def read_text(self, text: str, root: Optional[Node] = None) -> ParseResult:
        """Parse document text into ``root`` or a new root."""
        start_time = time.perf_counter()
        lines = LineSource.from_text(text, "<string>", self.config.reader)
        result = self._builder.build(lines.lines, root=root, source=lines.source)
        return self._record_read(result, start_time)

    def serialize(self, node: Node) -> str:
        start_time = time.perf_counter()
        text = self._writer.serialize(node)
        self._write_count += 1
        self._total_write_time += (time.perf_counter() - start_time) * MS_PER_SECOND
        return text

    def write(self, node: Node, destination: OutputType) -> None:
        """Serialize ``node`` and write it out in one call.

        Raises:
            SinkUnwritableError: The destination could not be written
        """
        ByteSink(destination, self.config.writer).write(self.serialize(node))

    def reconfigure(self, config: DatafileConfig) -> None:
        """Replace the configuration used by later reads and writes."""
        self.config = config
        self._builder = DatafileTreeBuilder(self.correlation_id, self.config)
        self._writer = DatafileWriter(self.correlation_id, self.config)
        self.logger.info(
            "Processor reconfigured",
            extra={"config_name": self.config.name},
        )

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get processor usage statistics."""
        return {
            "total_reads": self._read_count,
            "total_writes": self._write_count,
            "total_diagnostics": self._diagnostic_count,
            "total_read_time_ms": self._total_read_time,
            "total_write_time_ms": self._total_write_time,
            "average_read_time_ms": (
                self._total_read_time / self._read_count if self._read_count else 0.0
            ),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset processor usage statistics."""
        self._read_count = 0
        self._write_count = 0
        self._diagnostic_count = 0
        self._total_read_time = 0.0
        self._total_write_time = 0.0
        self.logger.info("Processor statistics reset")
