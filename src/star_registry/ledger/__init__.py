"""Ledger package — the hash-linked, append-only chain of star claims.

Public surface
--------------
- :class:`Block`                 — one hash-linked entry; owns its integrity check.
- :class:`StarClaim`             — decoded payload of every non-genesis block.
- :class:`Ledger`                — the chain; single-writer append and lookups.
- :func:`validate_chain`         — heights of every corrupted block.
- :func:`inspect_chain`          — the same walk, with a per-block explanation.
- :class:`ChainValidationReport` — result object returned by :func:`inspect_chain`.

Usage example
-------------
::

    from star_registry.ledger import Block, Ledger, validate_chain

    ledger = Ledger()
    ledger.append(Block.from_payload({"address": "1Abc...", ...}))
    assert validate_chain(ledger) == []

Design notes
------------
- The chain lives in memory only; nothing is persisted between runs.
- Hashes are SHA-256 over a fixed canonical JSON header (see ``block.py``).
- Appends are serialised with a ``threading.Lock``; readers work on snapshots.
"""

from star_registry.ledger.block import (
    GENESIS_PAYLOAD,
    Block,
    StarClaim,
    decode_payload,
    encode_payload,
)
from star_registry.ledger.chain import Ledger, unix_now
from star_registry.ledger.validator import (
    BlockError,
    ChainValidationReport,
    inspect_chain,
    validate_chain,
)

__all__ = [
    "GENESIS_PAYLOAD",
    "Block",
    "BlockError",
    "ChainValidationReport",
    "Ledger",
    "StarClaim",
    "decode_payload",
    "encode_payload",
    "inspect_chain",
    "unix_now",
    "validate_chain",
]
