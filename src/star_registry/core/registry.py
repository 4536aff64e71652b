"""Star registry: the ownership challenge protocol on top of the ledger.

Workflow
--------
1. A claimant asks for a challenge for their wallet address::

       <address>:<unix seconds>:starRegistry

2. They sign that exact string with their wallet (Electrum, Bitcoin Core...).
3. They submit address, message, signature and star metadata.  The registry
   rejects the submission if the challenge is ``challenge_window_seconds``
   old or older (checked first, before any signature work), then verifies
   the signature, and only then appends a new block.

A rejected submission leaves the ledger untouched; the claimant must request
a fresh challenge.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from star_registry.config import DEFAULT_CHALLENGE_WINDOW_SECONDS
from star_registry.core.errors import ChallengeExpiredError, InvalidSignatureError
from star_registry.crypto.bitcoin_message import verify_message
from star_registry.ledger.block import Block, StarClaim
from star_registry.ledger.chain import Clock, Ledger, unix_now
from star_registry.ledger.validator import ChainValidationReport, inspect_chain, validate_chain

logger = logging.getLogger(__name__)

CHALLENGE_TAG = "starRegistry"

# (message, address, signature) -> bool
Verifier = Callable[[str, str, str], bool]


@dataclass(frozen=True)
class Challenge:
    """The fields of a challenge message.

    Attributes:
        address:   Address the challenge was issued for.
        timestamp: Unix seconds at issuance, or ``None`` if unparseable.
        tag:       Trailing tag, normally :data:`CHALLENGE_TAG`.
    """

    address: str
    timestamp: int | None
    tag: str


def format_challenge(address: str, timestamp: int) -> str:
    return f"{address}:{timestamp}:{CHALLENGE_TAG}"


def parse_challenge(message: str) -> Challenge:
    """Split a challenge message into its fields.

    The timestamp is the second colon-delimited field.  A missing or
    non-integer timestamp is reported as ``None`` rather than raising.
    """
    parts = message.split(":")
    address = parts[0]
    tag = parts[2] if len(parts) > 2 else ""
    timestamp: int | None
    try:
        timestamp = int(parts[1]) if len(parts) > 1 else None
    except ValueError:
        timestamp = None
    return Challenge(address=address, timestamp=timestamp, tag=tag)


class StarRegistry:
    """Registry operations over a single in-memory :class:`Ledger`.

    Args:
        ledger: Existing ledger to operate on.  A new one (sharing ``clock``)
            is created when omitted.
        clock: Callable returning the current Unix time in seconds.
        challenge_window_seconds: Challenges this old or older are rejected.
        verifier: Signature check, ``verifier(message, address, signature)``.
    """

    def __init__(
        self,
        ledger: Ledger | None = None,
        *,
        clock: Clock | None = None,
        challenge_window_seconds: int = DEFAULT_CHALLENGE_WINDOW_SECONDS,
        verifier: Verifier = verify_message,
    ) -> None:
        self.clock: Clock = clock or unix_now
        self.ledger = ledger if ledger is not None else Ledger(clock=self.clock)
        self.challenge_window_seconds = challenge_window_seconds
        self.verifier = verifier

    # ── Ownership challenge ───────────────────────────────────────────────────

    def request_challenge(self, address: str) -> str:
        """Return the message ``address`` must sign to claim a star."""
        message = format_challenge(address, self.clock())
        logger.debug("registry: issued challenge %r", message)
        return message

    def submit_claim(
        self,
        address: str,
        message: str,
        signature: str,
        star: Any,
    ) -> Block:
        """Verify an ownership proof and record the claim.

        Returns:
            The newly appended block.

        Raises:
            ChallengeExpiredError: If the challenge is at least
                ``challenge_window_seconds`` old or carries no timestamp.
            InvalidSignatureError: If ``signature`` does not verify for
                ``address`` over ``message``.
        """
        issued_at = parse_challenge(message).timestamp
        if issued_at is None:
            logger.warning("registry: rejected claim from %s, malformed challenge", address)
            raise ChallengeExpiredError(None, self.challenge_window_seconds)

        elapsed = self.clock() - issued_at
        if elapsed >= self.challenge_window_seconds:
            logger.warning(
                "registry: rejected claim from %s, challenge is %ds old", address, elapsed
            )
            raise ChallengeExpiredError(elapsed, self.challenge_window_seconds)

        if not self.verifier(message, address, signature):
            logger.warning("registry: rejected claim from %s, bad signature", address)
            raise InvalidSignatureError(address)

        claim = StarClaim(address=address, message=message, signature=signature, star=star)
        block = self.ledger.append(Block.from_claim(claim))
        logger.info("registry: recorded claim by %s at height %d", address, block.height)
        return block

    # ── Lookups ───────────────────────────────────────────────────────────────

    def get_height(self) -> int:
        return self.ledger.get_height()

    def get_block_by_hash(self, block_hash: str) -> Block:
        return self.ledger.get_block_by_hash(block_hash)

    def get_block_by_height(self, height: int) -> Block | None:
        return self.ledger.get_block_by_height(height)

    def get_claims_by_address(self, address: str) -> list[StarClaim]:
        return self.ledger.get_claims_by_address(address)

    # ── Validation ────────────────────────────────────────────────────────────

    def validate_chain(self) -> list[int]:
        """Heights of every corrupted block (empty when intact)."""
        return validate_chain(self.ledger)

    def inspect_chain(self) -> ChainValidationReport:
        return inspect_chain(self.ledger)
