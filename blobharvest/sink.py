#!/usr/bin/env python3
"""
Byte sinks for encoded blocks.

``BlobWriter`` splits the stream into ``{prefix}{i}.blob`` files, rolling to
the next file once the current one reaches the blob size. Rolls only happen
between writes, so a file may exceed the blob size by up to one write.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, List, Optional

from .config import DEFAULT_BLOB_SIZE
from .exceptions import InvalidConfig, IoFailure

logger = logging.getLogger(__name__)


def _close_quietly_on_error(sink, exc_type) -> None:
    """Close ``sink``; while another error is propagating, only log close failures."""
    if exc_type is None:
        sink.close()
        return
    try:
        sink.close()
    except IoFailure as e:
        logger.error(f"Close failed after {exc_type.__name__}: {e}")


class ByteSink(ABC):
    """Append-only byte sink with a running byte counter."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Append ``data``; return the number of bytes written."""

    @abstractmethod
    def written(self) -> int:
        """Total bytes written since the sink was created."""


class CountingWriter(ByteSink):
    """Counts bytes passed through to an existing binary stream."""

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.total = 0

    def write(self, data: bytes) -> int:
        try:
            n = self.stream.write(data)
        except OSError as e:
            raise IoFailure(f"write failed: {e}") from e
        n = len(data) if n is None else n
        self.total += n
        return n

    def written(self) -> int:
        return self.total

    def close(self) -> None:
        try:
            self.stream.flush()
        except OSError as e:
            raise IoFailure(f"flush failed: {e}") from e

    def __enter__(self) -> "CountingWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        _close_quietly_on_error(self, exc_type)


class BlobWriter(ByteSink):
    """Writes a byte stream into numbered blob files of bounded size."""

    def __init__(self, prefix: str, blob_size: int = DEFAULT_BLOB_SIZE):
        if blob_size <= 0:
            raise InvalidConfig(f"blob size must be positive, got {blob_size}")

        self.prefix = prefix
        self.blob_size = blob_size
        self.total = 0
        self.blob_start = 0
        self.blob_index = 0
        self.file: Optional[BinaryIO] = None
        self._paths: List[Path] = []

        parent = Path(self.blob_path(0)).parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IoFailure(f"cannot create output directory {parent}: {e}") from e

        self._open(0)

    def blob_path(self, index: int) -> str:
        return f"{self.prefix}{index}.blob"

    def paths(self) -> List[Path]:
        """Files created so far, in order."""
        return list(self._paths)

    def _open(self, index: int) -> None:
        path = self.blob_path(index)
        try:
            self.file = open(path, 'wb')
        except OSError as e:
            raise IoFailure(f"cannot create {path}: {e}") from e
        self._paths.append(Path(path))
        logger.debug(f"Opened blob {path}")

    def _close_current(self) -> None:
        if self.file is None:
            return
        f, self.file = self.file, None
        try:
            f.close()
        except OSError as e:
            raise IoFailure(f"cannot close {f.name}: {e}") from e

    def _roll(self) -> None:
        self._close_current()
        logger.debug(f"Blob {self.blob_index} complete at {self.total - self.blob_start} bytes")
        self.blob_start = self.total
        self.blob_index += 1
        self._open(self.blob_index)

    def write(self, data: bytes) -> int:
        if self.file is None:
            raise IoFailure("write to closed blob writer")
        if not data:
            return 0

        try:
            n = self.file.write(data)
        except OSError as e:
            raise IoFailure(f"cannot write {self.blob_path(self.blob_index)}: {e}") from e

        self.total += n
        if self.total - self.blob_start >= self.blob_size:
            self._roll()
        return n

    def written(self) -> int:
        return self.total

    def close(self) -> None:
        """Flush and close the current blob. Safe to call more than once."""
        self._close_current()

    @property
    def closed(self) -> bool:
        return self.file is None

    def __enter__(self) -> "BlobWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        _close_quietly_on_error(self, exc_type)
