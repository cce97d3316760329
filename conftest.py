import random
from dataclasses import dataclass, field
from typing import Dict, List

import pytest

from blobharvest.chain import BlockSource, ChainProbe
from blobharvest.sink import ByteSink


def make_block(number: int, timestamp: int, tx_count: int = 1) -> dict:
    """Block shaped like web3's get_block(..., full_transactions=True)."""
    transactions = [
        {
            'nonce': i,
            'from': '0x' + f"{number % 256:02x}" * 20,
            'to': None if i == 0 else '0x' + 'ab' * 20,
            'value': 10 ** 18 + i,
            'gas': 21000,
            'gasPrice': 30 * 10 ** 9,
            'input': bytes([number % 256, i]),
        }
        for i in range(tx_count)
    ]
    return {
        'number': number,
        'hash': number.to_bytes(32, 'big'),
        'parentHash': max(number - 1, 0).to_bytes(32, 'big'),
        'timestamp': timestamp,
        'miner': '0x' + '11' * 20,
        'gasLimit': 30_000_000,
        'gasUsed': 21000 * tx_count,
        'baseFeePerGas': 7,
        'transactions': transactions,
    }


class FakeEth:
    def __init__(self, timestamps: List[int]):
        self.blocks = [make_block(i, ts) for i, ts in enumerate(timestamps)]
        self.calls: List[int] = []

    @property
    def block_number(self) -> int:
        return len(self.blocks) - 1

    def get_block(self, number, full_transactions=False):
        self.calls.append(number)
        if not 0 <= number < len(self.blocks):
            raise ValueError(f"Block with id: {number} not found")
        block = dict(self.blocks[number])
        if not full_transactions:
            block['transactions'] = [bytes(32) for _ in block['transactions']]
        return block


class FakeWeb3:
    """The slice of web3.Web3 the probe uses."""

    def __init__(self, timestamps: List[int]):
        self.eth = FakeEth(timestamps)


def fake_encoder(size: int):
    """Encoder writing ``size`` bytes derived from the block number."""
    def encode(block, sink):
        sink.write(bytes([block['number'] % 256]) * size)
    return encode


@dataclass
class RecordingSink(ByteSink):
    chunks: List[bytes] = field(default_factory=list)

    def write(self, data: bytes) -> int:
        self.chunks.append(bytes(data))
        return len(data)

    def written(self) -> int:
        return sum(len(c) for c in self.chunks)


@pytest.fixture
def timestamps():
    # head = 100, one block every 10 seconds from t=1000
    return [1000 + 10 * i for i in range(101)]


@pytest.fixture
def fake_w3(timestamps):
    return FakeWeb3(timestamps)


@pytest.fixture
def probe(fake_w3):
    return ChainProbe(fake_w3)


@pytest.fixture
def source_factory(probe):
    def build(size: int = 30):
        return BlockSource(probe, encoder=fake_encoder(size))
    return build


@pytest.fixture
def recording_sink():
    return RecordingSink()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def block_factory():
    return make_block


@pytest.fixture
def w3_factory():
    return FakeWeb3
