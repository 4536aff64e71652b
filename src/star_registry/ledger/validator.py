"""Full-chain integrity check.

Walks a snapshot of the ledger in height order and reports every block that
fails either of two checks:

1. **Hash mismatch**: the block's stored ``hash`` is not the digest of its
   own fields.  Linkage is not checked for such a block; its hash is already
   known bad.
2. **Link mismatch**: the block is internally consistent but its
   ``previous_hash`` differs from the stored hash of the block before it.

A block re-hashed after tampering passes check 1 but breaks check 2 for its
successor, so consistent tampering is still reported (one height later).

Corruption is the validator's normal output, not an error: nothing in this
module raises because the chain is damaged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Literal

from star_registry.ledger.block import Block
from star_registry.ledger.chain import Ledger

logger = logging.getLogger(__name__)

HASH_MISMATCH = "hash_mismatch"
LINK_MISMATCH = "link_mismatch"


@dataclass(frozen=True)
class BlockError:
    """One integrity failure found by :func:`inspect_chain`.

    Attributes:
        height: Position of the offending block in the walked sequence,
            which is its height in an untampered chain.  The stored
            ``height`` field is not trusted, since tampering may rewrite it.
        kind:   :data:`HASH_MISMATCH` or :data:`LINK_MISMATCH`.
    """

    height: int
    kind: Literal["hash_mismatch", "link_mismatch"]


@dataclass(frozen=True)
class ChainValidationReport:
    """Outcome of a full-chain check.

    Attributes:
        status: ``"ok"`` when no block failed, otherwise ``"corrupt"``.
        height: Height of the chain tip at the time of the snapshot.
        errors: One entry per offending block, in ascending order.
    """

    status: Literal["ok", "corrupt"]
    height: int
    errors: tuple[BlockError, ...] = field(default_factory=tuple)

    @property
    def corrupted_heights(self) -> list[int]:
        return [error.height for error in self.errors]


def _snapshot(source: Ledger | Iterable[Block]) -> list[Block]:
    if isinstance(source, Ledger):
        return source.blocks()
    return list(source)


def inspect_chain(source: Ledger | Iterable[Block]) -> ChainValidationReport:
    """Check every block of ``source`` and describe what is wrong.

    Args:
        source: A :class:`Ledger` (a snapshot is taken) or any iterable of
            blocks in height order.
    """
    blocks = _snapshot(source)
    errors: list[BlockError] = []

    for index, block in enumerate(blocks):
        if not block.validate():
            errors.append(BlockError(height=index, kind=HASH_MISMATCH))
        elif index > 0 and block.previous_hash != blocks[index - 1].hash:
            errors.append(BlockError(height=index, kind=LINK_MISMATCH))

    if errors:
        logger.warning(
            "ledger: chain validation found %d corrupted block(s) at heights %s",
            len(errors),
            [error.height for error in errors],
        )

    return ChainValidationReport(
        status="corrupt" if errors else "ok",
        height=len(blocks) - 1,
        errors=tuple(errors),
    )


def validate_chain(source: Ledger | Iterable[Block]) -> list[int]:
    """Return the heights of every corrupted block, ascending.

    An empty list means the chain is fully intact.
    """
    return inspect_chain(source).corrupted_heights
