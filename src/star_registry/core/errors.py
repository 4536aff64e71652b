"""Typed exceptions for the registry operations.

Every registry operation either returns its success value or raises exactly
one of the exceptions below.  Chain corruption is deliberately absent from
this hierarchy: the validator reports it as data (a list of heights), it
never raises.

Design intent:
    - Domain outcomes that are part of a lookup contract, such as a height
      outside the chain, are represented by ``None``.
    - Rejected claims and hash lookup misses raise typed exceptions so the
      API boundary can map them to deterministic HTTP status codes.
"""

from __future__ import annotations


class RegistryError(Exception):
    """Base exception for registry failures."""


class ChallengeExpiredError(RegistryError):
    """The signed challenge is older than the allowed window.

    Args:
        elapsed: Seconds between challenge issuance and submission, or
            ``None`` when the challenge timestamp could not be parsed.
        window: The configured validity window in seconds.
    """

    def __init__(self, elapsed: int | None, window: int) -> None:
        if elapsed is None:
            message = "Challenge message carries no valid timestamp"
        else:
            message = f"Challenge expired: {elapsed}s elapsed, limit is {window}s"
        super().__init__(message)
        self.elapsed = elapsed
        self.window = window


class InvalidSignatureError(RegistryError):
    """The signature does not prove control of ``address`` over the message."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Signature does not verify for address {address!r}")
        self.address = address


class BlockNotFoundError(RegistryError, KeyError):
    """No block in the chain carries the requested hash."""

    def __init__(self, block_hash: str) -> None:
        super().__init__(f"No block with hash {block_hash!r}")
        self.block_hash = block_hash

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message.
        return str(self.args[0])
