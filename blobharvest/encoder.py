"""
RLP record encoding for harvested blocks.

Each block becomes one RLP list written to the sink in a single call, so a
record never straddles two blob files.
"""

from typing import Any, Mapping

import rlp
from eth_utils import to_bytes, to_canonical_address
from rlp.sedes import Binary, CountableList, Serializable, big_endian_int, binary

from .exceptions import EncodeFailure

Address = Binary.fixed_length(20, allow_empty=True)
Hash32 = Binary.fixed_length(32)


class TransactionRecord(Serializable):
    fields = [
        ('nonce', big_endian_int),
        ('sender', Address),
        ('to', Address),  # empty for contract creation
        ('value', big_endian_int),
        ('gas', big_endian_int),
        ('gas_price', big_endian_int),
        ('data', binary),
    ]


class BlockRecord(Serializable):
    fields = [
        ('number', big_endian_int),
        ('hash', Hash32),
        ('parent_hash', Hash32),
        ('timestamp', big_endian_int),
        ('coinbase', Address),
        ('gas_limit', big_endian_int),
        ('gas_used', big_endian_int),
        ('base_fee', big_endian_int),
        ('transactions', CountableList(TransactionRecord)),
    ]


def _as_bytes(value: Any) -> bytes:
    if value is None:
        return b''
    if isinstance(value, str):
        return to_bytes(hexstr=value)
    return bytes(value)


def _as_address(value: Any) -> bytes:
    if not value:
        return b''
    return to_canonical_address(value)


def _as_int(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, str):
        return int(value, 16) if value.startswith('0x') else int(value)
    return int(value)


def transaction_record(tx: Mapping[str, Any]) -> TransactionRecord:
    # Typed transactions may omit gasPrice; fall back to the fee cap
    gas_price = tx.get('gasPrice', tx.get('maxFeePerGas'))
    return TransactionRecord(
        nonce=_as_int(tx['nonce']),
        sender=_as_address(tx.get('from')),
        to=_as_address(tx.get('to')),
        value=_as_int(tx['value']),
        gas=_as_int(tx['gas']),
        gas_price=_as_int(gas_price),
        data=_as_bytes(tx.get('input')),
    )


def block_record(block: Mapping[str, Any]) -> BlockRecord:
    """Build the record for a block fetched with full transactions."""
    transactions = []
    for tx in block.get('transactions', []):
        if not isinstance(tx, Mapping):
            raise EncodeFailure(
                f"block {block.get('number')} was fetched without full transactions"
            )
        transactions.append(transaction_record(tx))

    return BlockRecord(
        number=_as_int(block['number']),
        hash=_as_bytes(block['hash']),
        parent_hash=_as_bytes(block['parentHash']),
        timestamp=_as_int(block['timestamp']),
        coinbase=_as_address(block.get('miner')),
        gas_limit=_as_int(block['gasLimit']),
        gas_used=_as_int(block['gasUsed']),
        base_fee=_as_int(block.get('baseFeePerGas')),
        transactions=transactions,
    )


def encode_block(block: Mapping[str, Any], sink) -> None:
    """Append the RLP record for ``block`` to ``sink``."""
    data = rlp.encode(block_record(block))
    n = sink.write(data)
    if n != len(data):
        raise EncodeFailure(f"short write: {n} of {len(data)} bytes")
