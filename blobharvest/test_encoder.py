import rlp
import pytest

from blobharvest.encoder import BlockRecord, block_record, encode_block
from blobharvest.exceptions import EncodeFailure


class TestEncodeBlock:
    """RLP block records."""

    def test_single_write_per_block(self, block_factory, recording_sink):
        encode_block(block_factory(12, 1120, tx_count=3), recording_sink)
        assert len(recording_sink.chunks) == 1

    def test_deterministic(self, block_factory, recording_sink):
        block = block_factory(4, 1040, tx_count=2)
        encode_block(block, recording_sink)
        encode_block(dict(block), recording_sink)
        first, second = recording_sink.chunks
        assert first == second

    def test_decodes_back(self, block_factory, recording_sink):
        encode_block(block_factory(42, 1420, tx_count=2), recording_sink)
        record = rlp.decode(recording_sink.chunks[0], BlockRecord)

        assert record.number == 42
        assert record.timestamp == 1420
        assert record.hash == (42).to_bytes(32, 'big')
        assert record.coinbase == bytes.fromhex('11' * 20)
        assert record.base_fee == 7
        assert len(record.transactions) == 2
        creation, transfer = record.transactions
        assert creation.to == b''
        assert transfer.to == bytes.fromhex('ab' * 20)
        assert transfer.value == 10 ** 18 + 1
        assert transfer.data == bytes([42, 1])

    def test_accepts_hex_strings(self, block_factory):
        block = block_factory(1, 1010)
        block.update({
            'number': '0x1',
            'hash': '0x' + '00' * 31 + '01',
            'parentHash': '0x' + '00' * 32,
            'timestamp': '0x3f2',
            'baseFeePerGas': None,
        })
        record = block_record(block)
        assert record.number == 1
        assert record.timestamp == 1010
        assert record.base_fee == 0

    def test_typed_transaction_without_gas_price(self, block_factory):
        block = block_factory(2, 1020)
        tx = dict(block['transactions'][0])
        del tx['gasPrice']
        tx['maxFeePerGas'] = 99
        block['transactions'] = [tx]
        assert block_record(block).transactions[0].gas_price == 99

    def test_hash_only_transactions_rejected(self, block_factory):
        block = block_factory(3, 1030)
        block['transactions'] = [b'\x00' * 32]
        with pytest.raises(EncodeFailure):
            block_record(block)

    def test_short_write_is_encode_failure(self, block_factory):
        class ShortSink:
            def write(self, data):
                return len(data) - 1

        with pytest.raises(EncodeFailure):
            encode_block(block_factory(5, 1050), ShortSink())
