"""Ownership challenge and star claim endpoints."""

from fastapi import APIRouter, HTTPException

from star_registry.api.models import (
    BlockResponse,
    ChallengeRequest,
    StarClaimResponse,
    SubmitStarRequest,
)
from star_registry.core.errors import ChallengeExpiredError, InvalidSignatureError
from star_registry.core.registry import StarRegistry


def router(registry: StarRegistry) -> APIRouter:
    """Build the claims router with access to the registry."""
    api = APIRouter()

    @api.post("/requestValidation", response_model=str)
    async def request_validation(request: ChallengeRequest):
        """Return the challenge message the wallet must sign."""
        return registry.request_challenge(request.address)

    @api.post("/submitstar", response_model=BlockResponse)
    def submit_star(request: SubmitStarRequest):
        """
        Register a star for a wallet address.

        Responds 400 when the challenge is expired (request a new one) and
        401 when the signature does not prove ownership of the address.
        Runs in the threadpool (sync handler) since key recovery is CPU-bound.
        """
        try:
            block = registry.submit_claim(
                request.address, request.message, request.signature, request.star
            )
        except ChallengeExpiredError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        except InvalidSignatureError as e:
            raise HTTPException(status_code=401, detail=str(e)) from e
        return BlockResponse.from_block(block)

    @api.get("/blocks/{address}", response_model=list[StarClaimResponse])
    async def get_stars_by_address(address: str):
        """List every star claimed by ``address`` (possibly none)."""
        return [StarClaimResponse.from_claim(c) for c in registry.get_claims_by_address(address)]

    return api
