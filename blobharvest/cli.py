#!/usr/bin/env python3
"""
blobharvest CLI - harvest blocks from an execution node into blob files.

Usage:
    blobharvest --start-date 2024-01-01 --end-date now --out blocks/
    blobharvest --max 64 --start-date -1y   # 64 MiB of randomly sampled blocks
"""

import logging
import sys
from typing import Optional

import click

from .chain import BlockSource, ChainProbe
from .config import (
    DEFAULT_BLOB_SIZE,
    DEFAULT_END_DATE,
    DEFAULT_OUT_PREFIX,
    DEFAULT_RPC_URL,
    DEFAULT_START_DATE,
    HarvestConfig,
)
from .dates import parse_date
from .exceptions import HarvestError, InvalidConfig
from .harvest import check_range, harvest
from .progress import ProgressReporter
from .sink import BlobWriter, CountingWriter

logger = logging.getLogger(__name__)


def run(config: HarvestConfig, probe: Optional[ChainProbe] = None, rng=None):
    """Resolve the block range and harvest it. Raises HarvestError on failure."""
    config.validate()

    # Dates are checked before anything touches the node or the disk
    start_instant = parse_date(config.start_date)
    end_instant = parse_date(config.end_date)

    if probe is None:
        probe = ChainProbe.from_url(config.rpc_url)

    head = probe.head()
    start_num = probe.find_block_by_date(start_instant, head)
    end_num = probe.find_block_by_date(end_instant, head)
    logger.info(f"Head {head}, harvesting blocks [{start_num}, {end_num})")
    check_range(start_num, end_num)

    source = BlockSource(probe)

    if config.to_stdout:
        with CountingWriter(click.get_binary_stream('stdout')) as sink:
            return harvest(source, sink, start_num, end_num, config.max_bytes, rng)

    if config.sampled:
        reporter = ProgressReporter(config.max_bytes, "bytes")
    else:
        reporter = ProgressReporter(end_num - start_num, "blocks")

    with BlobWriter(config.out, config.blob_size) as sink:
        stats = harvest(source, sink, start_num, end_num, config.max_bytes, rng, reporter)
    stats.files = sink.paths()
    return stats


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.option('--start-date', default=DEFAULT_START_DATE, show_default=True,
              help='Start date: YYYY-MM-DD, now, or relative like -30d, -2m')
@click.option('--end-date', default=DEFAULT_END_DATE, show_default=True,
              help='End date: YYYY-MM-DD, now, or relative like -1h')
@click.option('--url', 'rpc_url', envvar='ETH_RPC_URL', default=DEFAULT_RPC_URL,
              show_default=True, help='Ethereum RPC URL')
@click.option('--max', 'max_mb', type=click.IntRange(min=0), default=0, show_default=True,
              help='Size in MiB of randomly sampled blocks. 0 writes every block in order.')
@click.option('--out', envvar='BLOBHARVEST_OUT', default=DEFAULT_OUT_PREFIX, show_default=True,
              help='Prefix for output blob files, or - for stdout')
@click.option('--blobsize', 'blob_size', type=int, default=DEFAULT_BLOB_SIZE, show_default=True,
              help='Bytes per blob file')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def main(start_date, end_date, rpc_url, max_mb, out, blob_size, verbose):
    """Harvest blocks from an execution node into fixed-size blob files."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    config = HarvestConfig(
        start_date=start_date,
        end_date=end_date,
        rpc_url=rpc_url,
        max_mb=max_mb,
        out=out,
        blob_size=blob_size,
    )

    try:
        stats = run(config)
    except InvalidConfig as e:
        click.echo(f"❌ Invalid configuration: {e}", err=True)
        sys.exit(1)
    except HarvestError as e:
        click.echo(f"❌ {type(e).__name__}: {e}", err=True)
        sys.exit(1)

    if config.to_stdout:
        return

    click.echo(f"\n✅ Harvested {stats.blocks} blocks from [{stats.start}, {stats.end}) "
               f"({stats.bytes_written:,} bytes) into {len(stats.files)} blob files")
    for path in stats.files:
        click.echo(f"  📁 {path}")


if __name__ == '__main__':
    main()
