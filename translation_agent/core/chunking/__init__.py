"""
Token-based chunking package.

Decides whether a text fits one request, splits it at natural boundaries
into token-bounded chunks carrying their surrounding context, and reassembles
the translated chunks.
"""

from .models import (
    StageStatus,
    TranslationRequest,
    Chunk,
    ChunkTranslationState,
    NoSplitNeeded,
    SplitRequired,
    SplitDecision,
)
from .token_counter import TokenCounter, resolve_token_counter
from .chunk_sizer import calculate_chunk_size, decide_split
from .splitter import ContextPreservingSplitter, build_chunks
from .reassembler import remove_wrapping_tags, reassemble
from .statistics import ChunkStatistics, calculate_chunk_statistics

__all__ = [
    'StageStatus',
    'TranslationRequest',
    'Chunk',
    'ChunkTranslationState',
    'NoSplitNeeded',
    'SplitRequired',
    'SplitDecision',
    'TokenCounter',
    'resolve_token_counter',
    'calculate_chunk_size',
    'decide_split',
    'ContextPreservingSplitter',
    'build_chunks',
    'remove_wrapping_tags',
    'reassemble',
    'ChunkStatistics',
    'calculate_chunk_statistics',
]
