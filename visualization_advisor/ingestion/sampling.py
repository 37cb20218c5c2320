"""
Sampling utilities for bounded-memory ingestion.

Provides reservoir sampling and the retained-sample buffer used while
streaming a file, so that arbitrarily large inputs can be counted without
unbounded memory growth.
"""

import random
from typing import List, Any, Optional


class ReservoirSampler:
    """
    Reservoir sampling implementation for memory-efficient sampling.

    Maintains a fixed-size reservoir of samples from a streaming dataset,
    ensuring each item has equal probability of being included regardless
    of total dataset size.

    Uses Algorithm R (Vitter, 1985) for efficient reservoir sampling. Each
    sampler owns its random generator, so two samplers over the same stream
    do not disturb each other or the global random state.
    """

    def __init__(self, reservoir_size: int = 100000, random_seed: Optional[int] = 42):
        """
        Initialize reservoir sampler.

        Args:
            reservoir_size: Maximum number of samples to retain
            random_seed: Random seed for reproducibility (None for random)
        """
        self.reservoir_size = reservoir_size
        self.reservoir: List[Any] = []
        self.items_seen = 0
        self._random = random.Random(random_seed)

    def add(self, item: Any) -> None:
        """
        Add an item to the reservoir sample.

        For the first k items, simply add to reservoir.
        For subsequent items, randomly replace an existing item
        with probability k/n where k=reservoir_size and n=items_seen.

        Args:
            item: Item to potentially add to reservoir
        """
        self.items_seen += 1

        if len(self.reservoir) < self.reservoir_size:
            self.reservoir.append(item)
        else:
            j = self._random.randint(0, self.items_seen - 1)
            if j < self.reservoir_size:
                self.reservoir[j] = item

    def add_batch(self, items: List[Any]) -> None:
        """
        Add multiple items to the reservoir sample.

        Args:
            items: List of items to add
        """
        for item in items:
            self.add(item)

    def get_sample(self) -> List[Any]:
        """
        Get the current reservoir sample.

        Returns:
            List of sampled items (up to reservoir_size)
        """
        return self.reservoir.copy()

    def get_count(self) -> int:
        """Total number of items seen (not just in reservoir)."""
        return self.items_seen

    def get_sample_size(self) -> int:
        return len(self.reservoir)

    def clear(self) -> None:
        """Clear the reservoir and reset counters."""
        self.reservoir = []
        self.items_seen = 0


class SampleBuffer:
    """
    Retained-row buffer with a prefix phase and a reservoir phase.

    While fewer than max_chunk_collect rows have been seen, the buffer holds
    the first max_rows_to_keep rows of the stream. A reservoir of the same
    size is maintained alongside from the first row on. Once the row count
    crosses max_chunk_collect the prefix is dropped and the reservoir, a
    uniform sample of every row seen so far, becomes the buffer; it keeps
    sampling for the rest of the stream.

    Example:
        >>> buffer = SampleBuffer(max_rows_to_keep=2, max_chunk_collect=4)
        >>> buffer.add_batch([{'x': i} for i in range(10)])
        >>> buffer.total_row_count, len(buffer.rows), buffer.switched_to_reservoir
        (10, 2, True)
    """

    def __init__(
        self,
        max_rows_to_keep: int,
        max_chunk_collect: int,
        random_seed: Optional[int] = 42,
    ):
        self.max_rows_to_keep = max_rows_to_keep
        self.max_chunk_collect = max_chunk_collect
        self.total_row_count = 0
        self.switched_to_reservoir = False
        self._prefix: List[Any] = []
        self._reservoir = ReservoirSampler(max_rows_to_keep, random_seed=random_seed)

    def add(self, row: Any) -> None:
        self.total_row_count += 1
        self._reservoir.add(row)

        if self.switched_to_reservoir:
            return

        if len(self._prefix) < self.max_rows_to_keep:
            self._prefix.append(row)

        if self.total_row_count > self.max_chunk_collect:
            self.switched_to_reservoir = True
            self._prefix = []

    def add_batch(self, rows: List[Any]) -> None:
        for row in rows:
            self.add(row)

    @property
    def rows(self) -> List[Any]:
        """Currently retained rows (a fresh list)."""
        if self.switched_to_reservoir:
            return self._reservoir.get_sample()
        return list(self._prefix)

    @property
    def retained_count(self) -> int:
        if self.switched_to_reservoir:
            return self._reservoir.get_sample_size()
        return len(self._prefix)

    @property
    def is_sampled(self) -> bool:
        return self.retained_count < self.total_row_count
