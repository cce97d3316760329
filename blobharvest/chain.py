#!/usr/bin/env python3
"""
Chain access for the harvester.
Reads the head, headers and full blocks from an execution node and resolves
timestamps to block heights.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from web3 import Web3, HTTPProvider

from .encoder import encode_block
from .exceptions import EncodeFailure, HarvestError, RpcFailure
from .search import binary_search, sign
from .sink import ByteSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockHeader:
    number: int
    timestamp: int


class ChainProbe:
    """Read-only view of a node: head height, headers and blocks."""

    def __init__(self, w3: Web3):
        self.w3 = w3
        self._headers: Dict[int, BlockHeader] = {}

    @classmethod
    def from_url(cls, rpc_url: str) -> "ChainProbe":
        """Dial an HTTP JSON-RPC endpoint."""
        logger.debug(f"Connecting to {rpc_url}")
        return cls(Web3(HTTPProvider(rpc_url)))

    def _call(self, what: str, fn: Callable[[], Any]) -> Any:
        try:
            return fn()
        except HarvestError:
            raise
        except Exception as e:
            raise RpcFailure(f"{what} failed: {e}") from e

    def head(self) -> int:
        return int(self._call("eth_blockNumber", lambda: self.w3.eth.block_number))

    def header_at(self, height: int) -> BlockHeader:
        """Header at ``height``; cached since headers never change."""
        if height in self._headers:
            return self._headers[height]

        block = self._call(
            f"header {height}",
            lambda: self.w3.eth.get_block(height, full_transactions=False),
        )
        try:
            header = BlockHeader(number=int(block['number']), timestamp=int(block['timestamp']))
        except (KeyError, TypeError, ValueError) as e:
            raise RpcFailure(f"malformed header {height}: {e}") from e

        self._headers[height] = header
        return header

    def block_at(self, height: int):
        return self._call(
            f"block {height}",
            lambda: self.w3.eth.get_block(height, full_transactions=True),
        )

    def find_block_by_date(self, instant: int, head: Optional[int] = None) -> int:
        """
        First height whose timestamp is >= ``instant``.

        Dates before block 0 give 0; dates after every block give the head.
        """
        if head is None:
            head = self.head()
        height = binary_search(0, head, lambda h: sign(self.header_at(h).timestamp - instant))
        logger.debug(f"Resolved timestamp {instant} to block {height} (head {head})")
        return height


class BlockSource:
    """Fetches blocks by height and streams their encoding into a sink."""

    def __init__(self, probe: ChainProbe, encoder: Callable[[Any, ByteSink], None] = encode_block):
        self.probe = probe
        self.encoder = encoder

    def write_block(self, height: int, sink: ByteSink) -> None:
        block = self.probe.block_at(height)
        try:
            self.encoder(block, sink)
        except HarvestError:
            raise
        except Exception as e:
            raise EncodeFailure(f"encoding block {height} failed: {e}") from e
