#!/usr/bin/env python3
"""
Harvest driver.

Sequential mode writes every block in [start, end) in ascending order.
Sampled mode draws heights uniformly, with replacement, until the sink holds
at least ``max_size`` bytes.
"""

import logging
import random
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .chain import BlockSource
from .exceptions import InvalidConfig
from .progress import ProgressReporter
from .sink import ByteSink

logger = logging.getLogger(__name__)

SEQUENTIAL = "sequential"
SAMPLED = "sampled"


@dataclass
class HarvestStats:
    mode: str
    start: int
    end: int
    blocks: int = 0
    bytes_written: int = 0
    files: List[Path] = field(default_factory=list)


def check_range(start: int, end: int) -> None:
    if start < 0:
        raise InvalidConfig(f"start block {start} is negative")
    if start > end:
        raise InvalidConfig(f"start block {start} is after end block {end}")


def harvest_sequential(source: BlockSource, sink: ByteSink, start: int, end: int,
                       reporter: Optional[ProgressReporter] = None) -> HarvestStats:
    stats = HarvestStats(mode=SEQUENTIAL, start=start, end=end)
    for height in range(start, end):
        source.write_block(height, sink)
        stats.blocks += 1
        if reporter is not None:
            reporter.update(height - start)
    stats.bytes_written = sink.written()
    return stats


def harvest_sampled(source: BlockSource, sink: ByteSink, start: int, end: int,
                    max_size: int, rng: Optional[random.Random] = None,
                    reporter: Optional[ProgressReporter] = None) -> HarvestStats:
    stats = HarvestStats(mode=SAMPLED, start=start, end=end)
    span = end - start
    if span == 0:
        logger.warning(f"Empty block range at {start}, nothing to sample")
        return stats

    rng = rng or secrets.SystemRandom()
    while sink.written() < max_size:
        height = start + rng.randrange(span)
        source.write_block(height, sink)
        stats.blocks += 1
        if reporter is not None:
            reporter.update(sink.written())
    stats.bytes_written = sink.written()
    return stats


def harvest(source: BlockSource, sink: ByteSink, start: int, end: int,
            max_size: int = 0, rng: Optional[random.Random] = None,
            reporter: Optional[ProgressReporter] = None) -> HarvestStats:
    """Run a harvest over [start, end); ``max_size`` > 0 selects sampled mode."""
    check_range(start, end)
    if max_size < 0:
        raise InvalidConfig(f"max size must not be negative, got {max_size}")

    if max_size > 0:
        logger.info(f"Sampling blocks {start}-{end} until {max_size:,} bytes")
        stats = harvest_sampled(source, sink, start, end, max_size, rng, reporter)
    else:
        logger.info(f"Writing blocks {start}-{end} ({end - start} blocks)")
        stats = harvest_sequential(source, sink, start, end, reporter)

    logger.info(f"Harvested {stats.blocks} blocks, {stats.bytes_written:,} bytes")
    return stats
