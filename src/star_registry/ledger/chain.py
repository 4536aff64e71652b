"""In-memory, append-only chain of hash-linked blocks.

Concurrency
-----------
:meth:`Ledger.append` is the only mutator and runs entirely under an
exclusive ``threading.Lock``: the new block's height and ``previous_hash``
depend on a consistent view of the tip, so two appends must never
interleave.  Readers take a shallow copy of the sequence under the same lock
(:meth:`Ledger.blocks`) and then work lock-free on that snapshot, so they see
either the pre-append or the post-append chain, never a half-updated one.

Atomicity
---------
Linkage fields are assigned and the hash computed *before* the block is
pushed.  If anything raises on the way, the block's fields are restored and
the sequence is untouched.  The chain height is derived from the sequence
length, so the two can never disagree.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from datetime import UTC, datetime

from star_registry.core.errors import BlockNotFoundError
from star_registry.ledger.block import GENESIS_PAYLOAD, Block, StarClaim

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def unix_now() -> int:
    """Current wall-clock time in whole Unix seconds (UTC)."""
    return int(datetime.now(UTC).timestamp())


class Ledger:
    """The ordered sequence of blocks, starting at a genesis block.

    The genesis block is created synchronously by the constructor, so every
    observable ledger has at least one block.

    Args:
        clock: Callable returning the current Unix time in seconds.  Used to
            stamp appended blocks.  Defaults to :func:`unix_now`.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock: Clock = clock or unix_now
        self._chain: list[Block] = []
        self._lock = threading.Lock()
        self.initialize()

    # ── Writes ────────────────────────────────────────────────────────────────

    def initialize(self) -> None:
        """Create the genesis block if the chain is empty.  Idempotent."""
        with self._lock:
            if self._chain:
                return
            genesis = self._append_locked(Block.from_payload(GENESIS_PAYLOAD))
        logger.info("ledger: genesis block created %s", genesis.hash)

    def append(self, block: Block) -> Block:
        """Link ``block`` to the current tip and store it.

        Assigns ``height``, ``time``, ``previous_hash`` and ``hash`` on the
        block, then pushes it.  Either all of this happens or none of it.

        Returns:
            The appended block (the same object that was passed in).
        """
        with self._lock:
            appended = self._append_locked(block)
        logger.debug("ledger: appended block %d %s", appended.height, appended.hash)
        return appended

    def _append_locked(self, block: Block) -> Block:
        previous = (block.height, block.time, block.previous_hash, block.hash)
        try:
            block.height = len(self._chain)
            block.time = self._clock()
            block.previous_hash = self._chain[-1].hash if self._chain else None
            block.hash = block.compute_hash()
        except Exception:
            block.height, block.time, block.previous_hash, block.hash = previous
            raise
        self._chain.append(block)
        return block

    # ── Reads ─────────────────────────────────────────────────────────────────

    def blocks(self) -> list[Block]:
        """Return a consistent snapshot of the chain in height order."""
        with self._lock:
            return list(self._chain)

    @property
    def height(self) -> int:
        """Height of the tip block (``len - 1``)."""
        with self._lock:
            return len(self._chain) - 1

    def get_height(self) -> int:
        return self.height

    def get_block_by_hash(self, block_hash: str) -> Block:
        """Return the block whose stored hash equals ``block_hash``.

        Raises:
            BlockNotFoundError: If no block carries that hash.
        """
        for block in self.blocks():
            if block.hash == block_hash:
                return block
        raise BlockNotFoundError(block_hash)

    def get_block_by_height(self, height: int) -> Block | None:
        """Return the block at ``height`` or ``None`` when out of range."""
        snapshot = self.blocks()
        if 0 <= height < len(snapshot):
            return snapshot[height]
        return None

    def get_claims_by_address(self, address: str) -> list[StarClaim]:
        """Return every claim registered by ``address``, in ledger order."""
        claims = []
        for block in self.blocks():
            claim = block.decode()
            if claim is not None and claim.address == address:
                claims.append(claim)
        return claims

    def __len__(self) -> int:
        with self._lock:
            return len(self._chain)

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks())
