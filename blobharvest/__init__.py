"""
blobharvest - harvest execution-layer blocks into fixed-size blob files.

Modules:
- dates: start/end date parsing
- search: bisection over monotone predicates
- chain: node access and date to block resolution
- encoder: RLP block records
- sink: blob-splitting and counting writers
- progress: progress lines
- harvest: sequential and sampled drivers
- cli: command line interface

Usage:
    python -m blobharvest --help
"""

__version__ = "1.0.0"

from .chain import BlockHeader, BlockSource, ChainProbe
from .dates import parse_date
from .harvest import HarvestStats, harvest
from .search import binary_search
from .sink import BlobWriter, ByteSink, CountingWriter

__all__ = [
    'BlockHeader',
    'BlockSource',
    'ChainProbe',
    'parse_date',
    'HarvestStats',
    'harvest',
    'binary_search',
    'BlobWriter',
    'ByteSink',
    'CountingWriter',
]
