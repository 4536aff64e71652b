"""
Pydantic models for API requests and responses.

Models are organized into two categories:
1. Request models: Data sent FROM the client TO the server
2. Response models: Data sent FROM the server TO the client

Response models are built from the ledger's own dataclasses through the
``from_*`` constructors so the HTTP shapes stay in one place.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

from star_registry.ledger.block import Block, StarClaim
from star_registry.ledger.validator import ChainValidationReport

# ============================================================================
# REQUEST MODELS (Client → Server)
# ============================================================================


class ChallengeRequest(BaseModel):
    """
    Request an ownership challenge for a wallet address.

    Attributes:
        address: Base58 P2PKH wallet address the claimant controls
    """

    address: str = Field(min_length=1)


class SubmitStarRequest(BaseModel):
    """
    Submit a signed ownership challenge together with the star to register.

    Attributes:
        address: Wallet address the challenge was issued for
        message: The exact challenge string returned by /requestValidation
        signature: Base64 compact signature of ``message`` by ``address``
        star: Arbitrary star metadata (coordinates, story...)
    """

    address: str = Field(min_length=1)
    message: str = Field(min_length=1)
    signature: str = Field(min_length=1)
    star: Any = Field(default_factory=dict)


# ============================================================================
# RESPONSE MODELS (Server → Client)
# ============================================================================


class StarClaimResponse(BaseModel):
    """Decoded claim stored in a non-genesis block."""

    address: str
    message: str
    signature: str
    star: Any

    @classmethod
    def from_claim(cls, claim: StarClaim) -> "StarClaimResponse":
        return cls(**claim.to_dict())


class BlockResponse(BaseModel):
    """
    A stored block.

    ``data`` is the opaque hex payload exactly as hashed; ``claim`` is its
    decoded form, or null for the genesis block.
    """

    hash: str | None
    height: int | None
    time: int | None
    previous_hash: str | None
    data: str
    claim: StarClaimResponse | None = None

    @classmethod
    def from_block(cls, block: Block) -> "BlockResponse":
        claim = block.decode()
        return cls(
            **block.to_dict(),
            claim=StarClaimResponse.from_claim(claim) if claim is not None else None,
        )


class BlockErrorResponse(BaseModel):
    """One corrupted block found by chain validation."""

    height: int
    kind: Literal["hash_mismatch", "link_mismatch"]


class ValidationResponse(BaseModel):
    """
    Chain validation result.

    Attributes:
        status: "ok" when intact, "corrupt" otherwise
        height: Chain height at the time of the check
        corrupted_heights: Ascending heights of every offending block
        errors: Per-block explanation of each failure
    """

    status: Literal["ok", "corrupt"]
    height: int
    corrupted_heights: list[int]
    errors: list[BlockErrorResponse]

    @classmethod
    def from_report(cls, report: ChainValidationReport) -> "ValidationResponse":
        return cls(
            status=report.status,
            height=report.height,
            corrupted_heights=report.corrupted_heights,
            errors=[BlockErrorResponse(height=e.height, kind=e.kind) for e in report.errors],
        )


class HealthResponse(BaseModel):
    """Liveness check with the current chain height."""

    status: str
    height: int
