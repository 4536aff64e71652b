"""Block and claim types for the star ledger.

Canonical serialisation
-----------------------
A block's hash is the SHA-256 hex digest of the compact JSON serialisation of
every field **except** ``hash`` itself::

    {"data":"7b22...","height":1,"previous_hash":"9f86...","time":1700000000}

Keys are emitted in sorted order (``data``, ``height``, ``previous_hash``,
``time``), separators carry no whitespace, integers are plain JSON numbers,
unset values are ``null`` and the text is encoded as UTF-8.  Changing any of
this changes every hash in the chain, so the format is fixed here and
nowhere else.

Payload encoding
----------------
``data`` holds the payload as lowercase hex of its canonical JSON form
(``sort_keys=True``, compact separators, UTF-8).  :func:`encode_payload` and
:func:`decode_payload` are exact inverses for any JSON-serialisable dict.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from typing import Any

# Marker stored in the genesis block.  Never decodes into a claim.
GENESIS_PAYLOAD: dict[str, Any] = {"data": "Genesis Block"}


# ── Payload encoding ──────────────────────────────────────────────────────────


def _canonical_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def encode_payload(payload: dict[str, Any]) -> str:
    """Encode a JSON-serialisable dict into the opaque ``data`` string."""
    return _canonical_json(payload).encode("utf-8").hex()


def decode_payload(data: str) -> dict[str, Any]:
    """Reverse :func:`encode_payload`.

    Raises:
        ValueError: If ``data`` is not hex, not UTF-8, or not a JSON object.
    """
    decoded = json.loads(bytes.fromhex(data).decode("utf-8"))
    if not isinstance(decoded, dict):
        raise ValueError("Block payload is not a JSON object")
    return decoded


# ── Claim ─────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class StarClaim:
    """A wallet address's claim over a star, with the proof that admitted it.

    Attributes:
        address:   Wallet address that signed the challenge.
        message:   The exact challenge string that was signed.
        signature: Base64 compact signature over ``message``.
        star:      Caller-supplied star metadata, any JSON value; opaque to
                   the ledger.
    """

    address: str
    message: str
    signature: str
    star: Any = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "message": self.message,
            "signature": self.signature,
            "star": self.star,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> StarClaim:
        """Build a claim from a decoded payload.

        Raises:
            KeyError: If a required field is missing.
        """
        return cls(
            address=payload["address"],
            message=payload["message"],
            signature=payload["signature"],
            star=payload["star"],
        )


# ── Block ─────────────────────────────────────────────────────────────────────


@dataclass
class Block:
    """One entry in the ledger.

    Only ``data`` is set at construction.  ``height``, ``time``,
    ``previous_hash`` and ``hash`` are assigned by
    :meth:`star_registry.ledger.chain.Ledger.append`.  The ledger never
    mutates a block after appending it; fields stay writable so that
    tampering can be simulated and then detected by :meth:`validate`.
    """

    data: str
    height: int | None = None
    time: int | None = None
    previous_hash: str | None = None
    hash: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Block:
        """Create an unappended block holding ``payload``."""
        return cls(data=encode_payload(payload))

    @classmethod
    def from_claim(cls, claim: StarClaim) -> Block:
        return cls.from_payload(claim.to_dict())

    # -- hashing ---------------------------------------------------------------

    def canonical_bytes(self) -> bytes:
        """Serialise every field except ``hash`` in the fixed canonical form."""
        header = {
            "data": self.data,
            "height": self.height,
            "previous_hash": self.previous_hash,
            "time": self.time,
        }
        return _canonical_json(header).encode("utf-8")

    def compute_hash(self) -> str:
        """Return the SHA-256 hex digest of :meth:`canonical_bytes`."""
        return hashlib.sha256(self.canonical_bytes()).hexdigest()

    def validate(self) -> bool:
        """Return ``True`` iff the stored hash matches the block's content.

        Pure comparison: a field tampered into something that cannot be
        serialised counts as invalid rather than raising.
        """
        try:
            return self.hash is not None and self.hash == self.compute_hash()
        except (TypeError, ValueError):
            return False

    # -- payload ---------------------------------------------------------------

    def payload(self) -> dict[str, Any]:
        """Decode ``data`` without interpreting it."""
        return decode_payload(self.data)

    def decode(self) -> StarClaim | None:
        """Return the claim this block records, or ``None`` for genesis.

        ``None`` is also returned for a payload that is not a claim, so
        callers scanning the chain can treat it as "no claim here".
        """
        if self.height == 0:
            return None
        try:
            payload = self.payload()
        except (TypeError, ValueError):
            return None
        if payload == GENESIS_PAYLOAD:
            return None
        try:
            return StarClaim.from_dict(payload)
        except (KeyError, TypeError):
            return None

    def is_genesis(self) -> bool:
        return self.height == 0

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly view of the stored fields."""
        return {
            "hash": self.hash,
            "height": self.height,
            "time": self.time,
            "previous_hash": self.previous_hash,
            "data": self.data,
        }
