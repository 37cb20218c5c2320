"""Base class for chunked record loaders."""

import io
import logging
import os
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Dict, Any, List, Optional, Union, BinaryIO

from visualization_advisor.core.constants import DEFAULT_CHUNK_SIZE
from visualization_advisor.core.exceptions import RowSkipped

logger = logging.getLogger(__name__)

Source = Union[bytes, bytearray, str, Path, BinaryIO]


@dataclass
class RecordChunk:
    """
    One parsed chunk of records.

    Attributes:
        records: Parsed records, in stream order
        columns: Column names known once this chunk was parsed
        stream: Name of the record stream the chunk belongs to. None for the
            single stream of a delimited file or a top-level JSON array; the
            property name for arrays found inside a top-level JSON object.
        skipped: Malformed rows dropped while parsing this chunk
    """
    records: List[Dict[str, Any]]
    columns: List[str] = field(default_factory=list)
    stream: Optional[str] = None
    skipped: int = 0


class DataLoader(ABC):
    """
    Abstract base class for record loaders.

    A loader turns a raw source (bytes, a path or a binary file object) into
    an iterator of RecordChunk objects. Loaders never read the whole source
    into one structure; every implementation parses in bounded chunks.
    """

    def __init__(
        self,
        source: Source,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        file_name: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize loader.

        Args:
            source: Raw bytes, a file path, or a readable binary file object
            chunk_size: Number of records per chunk
            file_name: Display name used in errors and logs
            **kwargs: Loader-specific options
        """
        self.source = source
        self.chunk_size = chunk_size
        self.file_name = file_name or self._default_file_name(source)
        self.kwargs = kwargs
        self.columns: List[str] = []
        self.skipped_row_count = 0
        self.rows_emitted = 0
        self._skipped_at_last_emit = 0

    @abstractmethod
    def load(self) -> Iterator[RecordChunk]:
        """
        Parse the source incrementally.

        Yields:
            RecordChunk objects of at most chunk_size records
        """

    @contextmanager
    def open_binary(self) -> Iterator[BinaryIO]:
        """
        Open the source as a binary stream.

        Paths are opened and closed here; caller-owned file objects are left open.
        """
        if isinstance(self.source, (bytes, bytearray)):
            yield io.BytesIO(bytes(self.source))
        elif isinstance(self.source, (str, Path)):
            with open(self.source, 'rb') as handle:
                yield handle
        else:
            yield self.source

    def read_head(self, size: int) -> bytes:
        """Read up to size bytes from the start of the source without consuming it."""
        if isinstance(self.source, (bytes, bytearray)):
            return bytes(self.source[:size])
        if isinstance(self.source, (str, Path)):
            with open(self.source, 'rb') as handle:
                return handle.read(size)

        position = self.source.tell()
        head = self.source.read(size)
        self.source.seek(position)
        return head

    def get_file_size(self) -> Optional[int]:
        """
        Get source size in bytes.

        Returns:
            Size in bytes, or None for non-seekable streams
        """
        if isinstance(self.source, (bytes, bytearray)):
            return len(self.source)
        if isinstance(self.source, (str, Path)):
            return os.path.getsize(self.source)
        try:
            position = self.source.tell()
            self.source.seek(0, io.SEEK_END)
            size = self.source.tell()
            self.source.seek(position)
            return size
        except (OSError, AttributeError):
            return None

    def is_empty(self) -> bool:
        return self.get_file_size() == 0

    def make_chunk(self, records: List[Dict[str, Any]], stream: Optional[str] = None) -> RecordChunk:
        """Wrap parsed records in a RecordChunk and update the emitted and skipped counters."""
        self.rows_emitted += len(records)
        skipped = self.skipped_row_count - self._skipped_at_last_emit
        self._skipped_at_last_emit = self.skipped_row_count
        return RecordChunk(records=records, columns=list(self.columns), stream=stream, skipped=skipped)

    def record_skipped(self, reason: str, row_number: Optional[int] = None, raw: Any = None) -> None:
        """Count a malformed row and log it at DEBUG."""
        self.skipped_row_count += 1
        skipped = RowSkipped(reason, row_number=row_number, raw=raw)
        logger.debug(f"{self.file_name}: {skipped.message} (row {row_number})")

    def get_metadata(self) -> Dict[str, Any]:
        """
        Get source metadata.

        Returns:
            Dictionary with source metadata
        """
        size = self.get_file_size()
        return {
            "file_name": self.file_name,
            "file_size_bytes": size,
            "file_size_mb": round(size / (1024 * 1024), 2) if size is not None else None,
            "columns": list(self.columns),
            "skipped_row_count": self.skipped_row_count,
        }

    @staticmethod
    def _default_file_name(source: Source) -> str:
        if isinstance(source, (str, Path)):
            return Path(source).name
        name = getattr(source, 'name', None)
        if isinstance(name, str):
            return Path(name).name
        return "<memory>"
