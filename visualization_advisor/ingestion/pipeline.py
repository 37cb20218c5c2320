"""
Ingestion Pipeline - chunked parsing with bounded-memory sampling.

Reads a raw file (delimited text, JSON or JSON Lines) chunk by chunk and
produces an IngestResult: a bounded sample of records, the true row count and
a content fingerprint.

Architecture:
    1. LoaderFactory picks the loader for the declared (or inferred) format
    2. The loader yields RecordChunk objects; cells are already native values
    3. Every valid row updates a SampleBuffer (prefix, then reservoir) and an
       independent FingerprintSampler for its record stream
    4. After the last chunk the longest record stream wins; for delimited
       text and top-level JSON arrays there is only one stream

Design Decisions:
    - Chunks are consumed strictly in order; the reservoir state of a chunk
      depends on every chunk before it
    - Cancellation is checked between chunks; partial state is discarded
    - ingest_async runs the synchronous pipeline on a worker thread and
      signals cancellation to it through a threading.Event

Usage:
    pipeline = IngestionPipeline(AdvisorConfig(max_rows_to_keep=50_000))
    result = pipeline.ingest(raw_bytes, "csv", file_name="sales.csv")
    print(f"{result.total_row_count:,} rows, fingerprint {result.fingerprint}")
"""

import asyncio
import logging
import threading
import time
from typing import Dict, List, Optional

from visualization_advisor.core.config import AdvisorConfig
from visualization_advisor.core.exceptions import (
    EmptyDataError,
    IngestionCancelledError,
    ParseError,
)
from visualization_advisor.ingestion.fingerprint import FingerprintSampler
from visualization_advisor.ingestion.result import IngestResult
from visualization_advisor.ingestion.sampling import SampleBuffer
from visualization_advisor.loaders.base import DataLoader, RecordChunk, Source
from visualization_advisor.loaders.factory import LoaderFactory

logger = logging.getLogger(__name__)


class StreamState:
    """Counters and samplers for one record stream."""

    def __init__(self, config: AdvisorConfig, stream: Optional[str] = None):
        self.stream = stream
        self.buffer = SampleBuffer(
            max_rows_to_keep=config.max_rows_to_keep,
            max_chunk_collect=config.max_chunk_collect,
            random_seed=config.random_seed,
        )
        self.fingerprint_sampler = FingerprintSampler(
            sample_size=config.fingerprint_sample_size,
            random_seed=config.random_seed,
        )
        self.columns: List[str] = []
        self.skipped_row_count = 0

    @property
    def total_row_count(self) -> int:
        return self.buffer.total_row_count

    def consume(self, chunk: RecordChunk) -> None:
        if not self.columns and chunk.columns:
            self.columns = list(chunk.columns)
        self.buffer.add_batch(chunk.records)
        self.fingerprint_sampler.add_batch(chunk.records)
        self.skipped_row_count += chunk.skipped


class IngestionPipeline:
    """
    Chunked ingestion with true row counts, bounded samples and fingerprints.

    Attributes:
        config: Ingestion limits (chunk size, sample bounds, seeds)
    """

    def __init__(self, config: Optional[AdvisorConfig] = None):
        self.config = config or AdvisorConfig()

    def ingest(
        self,
        source: Source,
        file_format: Optional[str] = None,
        file_name: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
        **loader_kwargs
    ) -> IngestResult:
        """
        Ingest a file.

        Args:
            source: Raw bytes, a file path, or a readable binary file object
            file_format: 'csv', 'json' or 'jsonl'; inferred from file_name when None
            file_name: Display name used in results, logs and errors
            cancel_event: Set from another thread to stop between chunks
            **loader_kwargs: Loader options (delimiter, encoding, ...)

        Returns:
            IngestResult

        Raises:
            ParseError: The stream is not valid delimited text or JSON
            EmptyDataError: Zero usable rows were found
            UnsupportedFormatError: The format is not supported
            IngestionCancelledError: cancel_event was set
        """
        start_time = time.time()

        resolved_format = LoaderFactory.resolve_format(
            file_format, file_name or LoaderFactory.source_name(source)
        )
        if resolved_format == "json":
            loader_kwargs.setdefault("block_size", self.config.json_read_block_size)

        loader = LoaderFactory.create_loader(
            source,
            file_format=resolved_format,
            file_name=file_name,
            chunk_size=self.config.chunk_size,
            **loader_kwargs
        )
        logger.info(f"Ingesting {loader.file_name} as {resolved_format}")

        states = self._consume_chunks(loader, cancel_event)
        winner = self._select_stream(loader, states)

        result = IngestResult(
            sample_rows=winner.buffer.rows,
            total_row_count=winner.total_row_count,
            fingerprint=winner.fingerprint_sampler.fingerprint(winner.columns, winner.total_row_count),
            is_sampled=winner.buffer.is_sampled,
            columns=winner.columns,
            skipped_row_count=winner.skipped_row_count,
            file_name=loader.file_name,
            file_format=resolved_format,
            record_path=winner.stream,
            elapsed_seconds=time.time() - start_time,
        )

        if result.skipped_row_count:
            logger.warning(f"{loader.file_name}: skipped {result.skipped_row_count:,} malformed rows")
        logger.info(
            f"Ingested {loader.file_name}: {result.total_row_count:,} rows "
            f"({len(result.sample_rows):,} retained, sampled={result.is_sampled}) "
            f"in {result.elapsed_seconds:.2f}s"
        )
        return result

    async def ingest_async(
        self,
        source: Source,
        file_format: Optional[str] = None,
        file_name: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
        **loader_kwargs
    ) -> IngestResult:
        """
        Non-blocking ingest.

        Parsing runs on a worker thread. Cancelling the awaiting task stops
        the worker at the next chunk boundary, discards partial state and
        re-raises asyncio.CancelledError to the caller.
        """
        cancel_event = cancel_event or threading.Event()
        try:
            return await asyncio.to_thread(
                self.ingest, source, file_format, file_name, cancel_event, **loader_kwargs
            )
        except asyncio.CancelledError:
            cancel_event.set()
            logger.info(f"Ingest of {file_name or 'source'} cancelled")
            raise

    def _consume_chunks(
        self,
        loader: DataLoader,
        cancel_event: Optional[threading.Event],
    ) -> Dict[Optional[str], StreamState]:
        states: Dict[Optional[str], StreamState] = {}
        chunks = loader.load()
        try:
            self._check_cancelled(loader, states, cancel_event)
            for chunk in chunks:
                self._check_cancelled(loader, states, cancel_event)
                state = states.get(chunk.stream)
                if state is None:
                    state = states[chunk.stream] = StreamState(self.config, chunk.stream)
                state.consume(chunk)
                logger.debug(
                    f"{loader.file_name}: chunk of {len(chunk.records):,} rows "
                    f"(total {state.total_row_count:,})"
                )
        finally:
            chunks.close()
        return states

    @staticmethod
    def _check_cancelled(
        loader: DataLoader,
        states: Dict[Optional[str], StreamState],
        cancel_event: Optional[threading.Event],
    ) -> None:
        if cancel_event is None or not cancel_event.is_set():
            return
        rows = sum(state.total_row_count for state in states.values())
        raise IngestionCancelledError(
            f"Ingest of {loader.file_name} cancelled after {rows:,} rows",
            file_name=loader.file_name,
            rows_processed=rows,
            columns=loader.columns,
        )

    @staticmethod
    def _select_stream(loader: DataLoader, states: Dict[Optional[str], StreamState]) -> StreamState:
        """The stream with the most valid rows; the first one wins a tie."""
        if not states:
            raise EmptyDataError(
                f"No data rows found in {loader.file_name}",
                file_name=loader.file_name,
                columns=loader.columns,
            )

        winner = max(states.values(), key=lambda state: state.total_row_count)
        if len(states) > 1:
            logger.debug(
                f"{loader.file_name}: using array '{winner.stream}' "
                f"({winner.total_row_count:,} rows) out of {len(states)} arrays"
            )

        if winner.total_row_count == 0:
            if winner.skipped_row_count:
                raise ParseError(
                    f"No valid rows in {loader.file_name}: "
                    f"all {winner.skipped_row_count:,} rows were malformed",
                    file_name=loader.file_name,
                    columns=winner.columns or loader.columns,
                )
            raise EmptyDataError(
                f"No data rows found in {loader.file_name}",
                file_name=loader.file_name,
                columns=winner.columns or loader.columns,
            )

        return winner
