"""
Statistics calculation for chunk analysis.

Provides token-size metrics for a split, used in run logs and by the CLI.
"""

import statistics as stats_module
from dataclasses import dataclass
from typing import Callable, Dict, Sequence

from .models import Chunk


@dataclass
class ChunkStatistics:
    """Aggregate token metrics for one split."""

    total_chunks: int = 0
    total_tokens: int = 0
    min_tokens: int = 0
    max_tokens: int = 0
    average_tokens: float = 0.0
    oversized_count: int = 0

    def to_dict(self) -> Dict[str, float]:
        return {
            'total_chunks': self.total_chunks,
            'total_tokens': self.total_tokens,
            'min_tokens': self.min_tokens,
            'max_tokens': self.max_tokens,
            'average_tokens': round(self.average_tokens, 1),
            'oversized_count': self.oversized_count,
        }

    def summary(self) -> str:
        line = (
            f"{self.total_chunks} chunks, {self.total_tokens} tokens "
            f"(min {self.min_tokens}, max {self.max_tokens}, avg {self.average_tokens:.1f})"
        )
        if self.oversized_count:
            line += f", {self.oversized_count} oversized"
        return line


def calculate_chunk_statistics(
    chunks: Sequence[Chunk],
    counter: Callable[[str], int],
    chunk_size: int
) -> ChunkStatistics:
    """
    Generate aggregate statistics for chunk size analysis.

    Args:
        chunks: Chunks from one split
        counter: Token counter used for the split
        chunk_size: Chunk size the split was bounded by

    Returns:
        ChunkStatistics; oversized_count counts chunks above chunk_size
        (atomic units that could not be split further)
    """
    if not chunks:
        return ChunkStatistics()

    sizes = [counter(chunk.text) for chunk in chunks]

    return ChunkStatistics(
        total_chunks=len(sizes),
        total_tokens=sum(sizes),
        min_tokens=min(sizes),
        max_tokens=max(sizes),
        average_tokens=stats_module.mean(sizes),
        oversized_count=sum(1 for size in sizes if size > chunk_size)
    )
