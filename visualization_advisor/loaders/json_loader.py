"""
JSON and JSON Lines loaders with incremental parsing.

The JSON loader never builds the whole document in memory: a small scanner
walks the top-level structure and hands each array element to
json.JSONDecoder.raw_decode, reading the stream in fixed-size blocks.

Supported layouts:
    - A top-level array of objects: the array is the record stream
    - A top-level object: every array-valued property is streamed as its own
      record stream, tagged with the property name; the caller keeps the
      longest one
    - JSON Lines: one object per line
"""

import codecs
import io
import json
import logging
from typing import Iterator, Any, BinaryIO, Dict, List, Optional

from visualization_advisor.core.constants import JSON_READ_BLOCK_SIZE
from visualization_advisor.core.exceptions import ParseError, EmptyDataError
from visualization_advisor.loaders.base import DataLoader, RecordChunk

logger = logging.getLogger(__name__)

_WHITESPACE = ' \t\n\r'

# Longest text a decode error can point back from when caused by the buffer end
TRUNCATION_WINDOW = 16


class JSONStreamReader:
    """
    Incremental reader over a UTF-8 JSON byte stream.

    Holds at most the unread part of the current block plus whatever a
    single value needs. A leading byte order mark is dropped.
    """

    def __init__(self, handle: BinaryIO, block_size: int = JSON_READ_BLOCK_SIZE):
        self._handle = handle
        self._text_decoder = codecs.getincrementaldecoder('utf-8-sig')()
        self._json = json.JSONDecoder()
        self.block_size = block_size
        self.buffer = ''
        self.pos = 0
        self.eof = False
        self.consumed_bytes = 0

    def _fill(self) -> bool:
        """Append the next block to the buffer; False once the stream is exhausted."""
        if self.eof:
            return False

        block = self._handle.read(self.block_size)
        if block:
            text = self._text_decoder.decode(block)
        else:
            text = self._text_decoder.decode(b'', final=True)
            self.eof = True

        if self.pos:
            self.consumed_bytes += len(self.buffer[:self.pos].encode('utf-8'))
            self.buffer = self.buffer[self.pos:]
            self.pos = 0
        self.buffer += text
        return bool(block) or bool(text)

    def peek(self) -> str:
        """Skip whitespace and return the next character, or '' at end of stream."""
        while True:
            while self.pos < len(self.buffer) and self.buffer[self.pos] in _WHITESPACE:
                self.pos += 1
            if self.pos < len(self.buffer):
                return self.buffer[self.pos]
            if not self._fill():
                return ''

    def advance(self) -> None:
        self.pos += 1

    def expect(self, char: str) -> None:
        if self.peek() != char:
            raise self.error(f"Expecting '{char}'")
        self.pos += 1

    def read_value(self) -> Any:
        """
        Decode the next complete JSON value.

        A value that ends exactly at the end of the buffer may be a truncated
        number, so more input is read and the value decoded again. A decode
        error is only retried with more input when it may come from the
        buffer ending early; any other error is raised at once so a bad
        element never pulls the rest of the stream into memory.
        """
        self.peek()
        while True:
            try:
                value, end = self._json.raw_decode(self.buffer, self.pos)
            except json.JSONDecodeError as e:
                if self._may_be_truncated(e) and self._fill():
                    continue
                raise
            if end == len(self.buffer) and self._fill():
                continue
            self.pos = end
            return value

    def _may_be_truncated(self, error: json.JSONDecodeError) -> bool:
        if error.msg.startswith("Unterminated string"):
            return True
        # Literals, escapes and delimiters can be cut by the block boundary
        return len(self.buffer) - error.pos <= TRUNCATION_WINDOW

    def error(self, message: str) -> json.JSONDecodeError:
        return json.JSONDecodeError(message, self.buffer, self.pos)

    def byte_offset(self, buffer_pos: int) -> int:
        """Absolute byte offset of a position in the current buffer."""
        return self.consumed_bytes + len(self.buffer[:buffer_pos].encode('utf-8'))


class JSONLoader(DataLoader):
    """
    Loader for JSON documents.

    Array elements that are not objects are skipped and counted. Values keep
    their native JSON types.
    """

    def __init__(self, source, chunk_size: int = 10000, file_name: Optional[str] = None, **kwargs):
        """
        Initialize JSONLoader.

        Args:
            source: Raw bytes, a file path, or a readable binary file object
            chunk_size: Number of records per chunk
            file_name: Display name used in errors and logs
            **kwargs: Additional options (block_size)
        """
        super().__init__(source, chunk_size, file_name, **kwargs)
        self.block_size = kwargs.get('block_size') or JSON_READ_BLOCK_SIZE
        self.streams_found: List[str] = []

    def load(self) -> Iterator[RecordChunk]:
        """
        Load JSON records in chunks.

        Yields:
            RecordChunk objects; chunk.stream names the source array

        Raises:
            ParseError: If the document is not valid JSON
            EmptyDataError: If the document holds no record array
        """
        with self.open_binary() as handle:
            reader = JSONStreamReader(handle, self.block_size)
            try:
                first = reader.peek()
                if first == '':
                    raise EmptyDataError(
                        f"No data found in {self.file_name}",
                        file_name=self.file_name
                    )

                if first == '[':
                    yield from self._stream_array(reader, stream=None)
                elif first == '{':
                    yield from self._stream_object(reader)
                else:
                    reader.read_value()
                    raise EmptyDataError(
                        f"Top-level JSON value in {self.file_name} is neither an array nor an object",
                        file_name=self.file_name
                    )

                if reader.peek() != '':
                    raise reader.error("Extra data after top-level value")

            except json.JSONDecodeError as e:
                raise ParseError(
                    f"JSON parsing error in {self.file_name}: {e.msg}",
                    file_name=self.file_name,
                    byte_offset=reader.byte_offset(e.pos),
                    rows_processed=self.rows_emitted,
                    columns=self.columns,
                    original_exception=e
                )

            except UnicodeDecodeError as e:
                raise ParseError(
                    f"Encoding error in {self.file_name}: JSON must be UTF-8",
                    file_name=self.file_name,
                    byte_offset=reader.consumed_bytes,
                    rows_processed=self.rows_emitted,
                    columns=self.columns,
                    original_exception=e
                )

    def _stream_array(self, reader: JSONStreamReader, stream: Optional[str]) -> Iterator[RecordChunk]:
        reader.expect('[')
        self.columns = []
        records: List[Dict[str, Any]] = []

        if reader.peek() == ']':
            reader.advance()
            yield self.make_chunk(records, stream)
            return

        index = 0
        while True:
            value = reader.read_value()
            if isinstance(value, dict):
                if not self.columns:
                    self.columns = [str(key) for key in value.keys()]
                records.append(value)
            else:
                self.record_skipped(
                    f"array element is {type(value).__name__}, not an object",
                    row_number=index,
                    raw=value
                )
            index += 1

            if len(records) >= self.chunk_size:
                yield self.make_chunk(records, stream)
                records = []

            separator = reader.peek()
            if separator == ',':
                reader.advance()
            elif separator == ']':
                reader.advance()
                break
            else:
                raise reader.error("Expecting ',' delimiter")

        yield self.make_chunk(records, stream)

    def _stream_object(self, reader: JSONStreamReader) -> Iterator[RecordChunk]:
        reader.expect('{')

        if reader.peek() == '}':
            reader.advance()
        else:
            while True:
                key = reader.read_value()
                if not isinstance(key, str):
                    raise reader.error("Expecting property name enclosed in double quotes")
                reader.expect(':')

                if reader.peek() == '[':
                    logger.debug(f"{self.file_name}: streaming array property '{key}'")
                    self.streams_found.append(key)
                    yield from self._stream_array(reader, stream=key)
                else:
                    reader.read_value()

                separator = reader.peek()
                if separator == ',':
                    reader.advance()
                elif separator == '}':
                    reader.advance()
                    break
                else:
                    raise reader.error("Expecting ',' delimiter")

        if not self.streams_found:
            raise EmptyDataError(
                f"Top-level JSON object in {self.file_name} has no array property",
                file_name=self.file_name
            )


class JSONLinesLoader(DataLoader):
    """
    Loader for newline-delimited JSON.

    Lines that are not valid JSON, or not objects, are skipped and counted.
    """

    def __init__(self, source, chunk_size: int = 10000, file_name: Optional[str] = None, **kwargs):
        super().__init__(source, chunk_size, file_name, **kwargs)
        self.encoding = kwargs.get('encoding') or 'utf-8-sig'

    def load(self) -> Iterator[RecordChunk]:
        """
        Load JSON Lines records in chunks.

        Yields:
            RecordChunk objects

        Raises:
            ParseError: If the stream cannot be decoded
        """
        with self.open_binary() as handle:
            text_stream = io.TextIOWrapper(handle, encoding=self.encoding)
            records: List[Dict[str, Any]] = []
            try:
                for line_number, line in enumerate(text_stream, start=1):
                    line = line.strip()
                    if not line:
                        continue

                    try:
                        value = json.loads(line)
                    except json.JSONDecodeError as e:
                        self.record_skipped(f"invalid JSON: {e.msg}", row_number=line_number, raw=line)
                        continue

                    if not isinstance(value, dict):
                        self.record_skipped(
                            f"line holds {type(value).__name__}, not an object",
                            row_number=line_number,
                            raw=line
                        )
                        continue

                    if not self.columns:
                        self.columns = [str(key) for key in value.keys()]
                    records.append(value)

                    if len(records) >= self.chunk_size:
                        yield self.make_chunk(records)
                        records = []

                yield self.make_chunk(records)

            except UnicodeDecodeError as e:
                raise ParseError(
                    f"Encoding error in {self.file_name}: cannot decode with {self.encoding}",
                    file_name=self.file_name,
                    rows_processed=self.rows_emitted,
                    columns=self.columns,
                    original_exception=e
                )
            finally:
                # Leave caller-owned handles open
                text_stream.detach()
