"""Block lookup and chain validation endpoints."""

from fastapi import APIRouter, HTTPException

from star_registry.api.models import BlockResponse, ValidationResponse
from star_registry.core.errors import BlockNotFoundError
from star_registry.core.registry import StarRegistry


def router(registry: StarRegistry) -> APIRouter:
    """Build the block router with access to the registry."""
    api = APIRouter()

    @api.get("/block/height/{height}", response_model=BlockResponse)
    async def get_block_by_height(height: int):
        """Return the block at ``height``; 404 when the chain is shorter."""
        block = registry.get_block_by_height(height)
        if block is None:
            raise HTTPException(status_code=404, detail=f"No block at height {height}")
        return BlockResponse.from_block(block)

    @api.get("/block/hash/{block_hash}", response_model=BlockResponse)
    async def get_block_by_hash(block_hash: str):
        """Return the block carrying ``block_hash``."""
        try:
            block = registry.get_block_by_hash(block_hash)
        except BlockNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        return BlockResponse.from_block(block)

    @api.get("/validate", response_model=ValidationResponse)
    async def validate_chain():
        """
        Re-derive every hash and link in the chain.

        Always 200: a corrupted chain is reported in the body, not as an
        HTTP error.
        """
        return ValidationResponse.from_report(registry.inspect_chain())

    return api
