"""CSV data loader with chunked reading for large files."""

import codecs
import csv
import logging
from typing import Any, Dict, Iterator, List, Optional

import pandas as pd

from visualization_advisor.core.constants import (
    CANDIDATE_DELIMITERS,
    CANDIDATE_ENCODINGS,
    DETECTION_SAMPLE_BYTES,
)
from visualization_advisor.core.exceptions import ParseError, EmptyDataError
from visualization_advisor.core.values import coerce_cell
from visualization_advisor.loaders.base import DataLoader, RecordChunk

logger = logging.getLogger(__name__)


def detect_encoding(sample: bytes) -> str:
    """
    Detect the encoding of a byte sample by trying common encodings.

    The sample may end in the middle of a multi-byte character, so decoding
    is done incrementally and a truncated tail is not treated as an error.

    Args:
        sample: Leading bytes of the file

    Returns:
        Detected encoding name, defaults to 'utf-8'
    """
    if sample.startswith(codecs.BOM_UTF8):
        return 'utf-8-sig'

    for encoding in CANDIDATE_ENCODINGS:
        try:
            codecs.getincrementaldecoder(encoding)().decode(sample, final=False)
            return encoding
        except UnicodeDecodeError:
            continue

    return 'utf-8'


def detect_delimiter(text: str) -> str:
    """
    Auto-detect the delimiter of a delimited-text sample.

    Args:
        text: Decoded leading text of the file

    Returns:
        Detected delimiter character, defaults to ',' if detection fails
    """
    # Only complete lines are offered to the sniffer
    if '\n' in text:
        text = text[:text.rfind('\n')]
    if not text.strip():
        return ','

    try:
        dialect = csv.Sniffer().sniff(text, delimiters=CANDIDATE_DELIMITERS)
        return dialect.delimiter
    except csv.Error:
        return ','


def read_header(text: str, delimiter: str) -> List[str]:
    """Column names from the first line of a decoded sample."""
    for row in csv.reader(text.splitlines(), delimiter=delimiter):
        if row:
            return [name.strip() for name in row]
    return []


class CSVLoader(DataLoader):
    """
    Loader for CSV and delimited text files with robust error handling.

    Every cell is read as text and classified individually (numbers,
    booleans, ISO dates, empty cells as null), so the same raw value always
    produces the same native value whatever column it sits in.

    Lines with more fields than the header are skipped and counted. Lines
    with fewer fields are kept; the missing cells are null.
    """

    def __init__(self, source, chunk_size: int = 10000, file_name: Optional[str] = None, **kwargs):
        """
        Initialize CSVLoader with auto-detection capabilities.

        Args:
            source: Raw bytes, a file path, or a readable binary file object
            chunk_size: Number of rows per chunk
            file_name: Display name used in errors and logs
            **kwargs: Additional options (delimiter, encoding)
        """
        super().__init__(source, chunk_size, file_name, **kwargs)
        self.delimiter = kwargs.get('delimiter')
        self.encoding = kwargs.get('encoding')

    def _detect_format(self) -> str:
        """Fill in encoding and delimiter when not given; returns the decoded sample."""
        sample = self.read_head(DETECTION_SAMPLE_BYTES)

        if self.encoding is None:
            self.encoding = detect_encoding(sample)
            if self.encoding not in ('utf-8', 'utf-8-sig'):
                logger.info(f"Auto-detected encoding: {self.encoding}")

        text = codecs.getincrementaldecoder(self.encoding)(errors='replace').decode(sample, final=False)

        if self.delimiter is None:
            self.delimiter = detect_delimiter(text)
            if self.delimiter != ',':
                logger.info(f"Auto-detected delimiter: {repr(self.delimiter)}")

        return text

    def load(self) -> Iterator[RecordChunk]:
        """
        Load delimited text in chunks.

        A tokenizer error (typically an unterminated quote) stops pandas in
        the middle of a chunk. The stream is then re-read row by row from the
        last emitted row, every row before the error is kept, and the
        unparseable tail counts as one skipped row.

        Yields:
            RecordChunk objects with classified cell values

        Raises:
            ParseError: If the stream cannot be decoded, or no row can be tokenized
            EmptyDataError: If the stream holds no header at all
        """
        text = self._detect_format()
        self.columns = read_header(text, self.delimiter)

        try:
            try:
                for records in self._read_records(self.chunk_size):
                    yield self.make_chunk(records)
            except (pd.errors.ParserError, csv.Error) as e:
                yield from self._salvage_rows(e)

        except pd.errors.EmptyDataError as e:
            raise EmptyDataError(
                f"No data found in {self.file_name}",
                file_name=self.file_name,
                rows_processed=self.rows_emitted,
                columns=self.columns,
                original_exception=e
            )

        except UnicodeDecodeError as e:
            raise ParseError(
                f"Encoding error in {self.file_name}: cannot decode with {self.encoding}",
                file_name=self.file_name,
                rows_processed=self.rows_emitted,
                columns=self.columns,
                original_exception=e
            )

    def _read_records(self, chunk_size: int, resume_at: int = 0) -> Iterator[List[Dict[str, Any]]]:
        """
        Parse the stream with pandas and yield classified record lists.

        Rows before resume_at are parsed but not yielded, and bad lines among
        them are not counted again.
        """
        seen = 0

        def skip_bad_line(bad_line: List[str]) -> None:
            if seen >= resume_at:
                self.record_skipped(
                    f"expected {len(self.columns)} fields, found {len(bad_line)}",
                    raw=self.delimiter.join(bad_line),
                )
            return None

        with self.open_binary() as handle:
            with pd.read_csv(
                handle,
                sep=self.delimiter,
                encoding=self.encoding,
                header=0,
                dtype=str,
                keep_default_na=False,
                na_filter=False,
                skip_blank_lines=True,
                engine="python",
                chunksize=chunk_size,
                on_bad_lines=skip_bad_line,
            ) as reader:
                for frame in reader:
                    self.columns = [str(col) for col in frame.columns]
                    records = [
                        {col: coerce_cell(value) for col, value in zip(self.columns, row)}
                        for row in frame.itertuples(index=False, name=None)
                    ]
                    start = max(0, resume_at - seen)
                    seen += len(records)
                    if resume_at and seen <= resume_at:
                        continue
                    yield records[start:]

    def _salvage_rows(self, error: Exception) -> Iterator[RecordChunk]:
        resume_at = self.rows_emitted
        logger.warning(
            f"CSV tokenizer error in {self.file_name} after {resume_at:,} rows: {error}; "
            f"re-reading row by row"
        )
        # Bad lines of the interrupted chunk are counted again by the re-read
        self.skipped_row_count = self._skipped_at_last_emit

        pending: List[Dict[str, Any]] = []
        tail_error: Optional[Exception] = None
        try:
            for records in self._read_records(1, resume_at=resume_at):
                pending.extend(records)
                if len(pending) >= self.chunk_size:
                    yield self.make_chunk(pending)
                    pending = []
        except (pd.errors.ParserError, csv.Error) as e:
            tail_error = e

        if self.rows_emitted + len(pending) == 0:
            raise ParseError(
                f"CSV parsing error in {self.file_name}: {tail_error or error}",
                file_name=self.file_name,
                rows_processed=0,
                columns=self.columns,
                original_exception=tail_error or error
            )

        if tail_error is not None:
            self.record_skipped(
                f"unparseable trailing data: {tail_error}",
                row_number=self.rows_emitted + len(pending) + 1,
            )
        yield self.make_chunk(pending)
