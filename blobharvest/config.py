#!/usr/bin/env python3
"""
Run configuration for block harvesting.
Defaults mirror the command line surface.
"""

from dataclasses import dataclass

from .exceptions import InvalidConfig

DEFAULT_START_DATE = "-30d"
DEFAULT_END_DATE = "now"
DEFAULT_RPC_URL = "http://localhost:8545"
DEFAULT_OUT_PREFIX = "blocks/"
DEFAULT_BLOB_SIZE = 128 * 1024
MEGABYTE = 1024 * 1024

# Passing this as the output prefix streams records to stdout
STDOUT_OUT = "-"


@dataclass
class HarvestConfig:
    """Configuration for a single harvest run."""

    start_date: str = DEFAULT_START_DATE
    end_date: str = DEFAULT_END_DATE
    rpc_url: str = DEFAULT_RPC_URL
    max_mb: int = 0
    out: str = DEFAULT_OUT_PREFIX
    blob_size: int = DEFAULT_BLOB_SIZE

    @property
    def max_bytes(self) -> int:
        """Sampled-mode byte budget; 0 selects sequential mode."""
        return self.max_mb * MEGABYTE

    @property
    def sampled(self) -> bool:
        return self.max_mb > 0

    @property
    def to_stdout(self) -> bool:
        return self.out == STDOUT_OUT

    def validate(self) -> "HarvestConfig":
        if self.blob_size <= 0:
            raise InvalidConfig(f"blobsize must be positive, got {self.blob_size}")
        if self.max_mb < 0:
            raise InvalidConfig(f"max must not be negative, got {self.max_mb}")
        if not self.rpc_url:
            raise InvalidConfig("RPC url must not be empty")
        return self
