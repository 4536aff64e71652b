"""Bitcoin "signed message" signatures over secp256k1.

This is the scheme wallets such as Electrum and Bitcoin Core use for
``signmessage`` / ``verifymessage``, so a claimant can prove control of a
legacy (P2PKH) address without revealing the private key.

Message digest
--------------
::

    sha256(sha256(b"\\x18Bitcoin Signed Message:\\n" + varint(len(msg)) + msg))

where ``msg`` is the UTF-8 encoding of the message text.

Signature format
----------------
Base64 of 65 bytes: a header byte followed by the 32-byte big-endian ``r``
and ``s`` values.  The header is ``27 + recid`` for an uncompressed public
key and ``31 + recid`` for a compressed one, where ``recid`` (0 or 1) tells
the verifier which of the two candidate public keys recovered from
``(r, s)`` is the signer's.

Verification recovers the public key, hashes it with HASH160
(``RIPEMD160(SHA256(pubkey))``) and compares the result with the hash
embedded in the Base58Check address.
"""

from __future__ import annotations

import base64
import hashlib
import logging

import base58
from Crypto.Hash import RIPEMD160
from ecdsa import SECP256k1, SigningKey, VerifyingKey
from ecdsa.util import sigdecode_string, sigencode_string_canonize

logger = logging.getLogger(__name__)

_MAGIC = b"\x18Bitcoin Signed Message:\n"

# Base58Check version bytes.
MAINNET_P2PKH = 0x00
TESTNET_P2PKH = 0x6F
MAINNET_WIF = 0x80
TESTNET_WIF = 0xEF

_P2PKH_VERSIONS = (MAINNET_P2PKH, TESTNET_P2PKH)

_HEADER_UNCOMPRESSED = 27
_HEADER_COMPRESSED = 31
_SIGNATURE_LENGTH = 65


# ── Hashing helpers ───────────────────────────────────────────────────────────


def _varint(n: int) -> bytes:
    if n < 0xFD:
        return n.to_bytes(1, "little")
    if n <= 0xFFFF:
        return b"\xfd" + n.to_bytes(2, "little")
    if n <= 0xFFFFFFFF:
        return b"\xfe" + n.to_bytes(4, "little")
    return b"\xff" + n.to_bytes(8, "little")


def message_digest(message: str) -> bytes:
    """Return the 32-byte double-SHA256 digest a wallet signs for ``message``."""
    encoded = message.encode("utf-8")
    payload = _MAGIC + _varint(len(encoded)) + encoded
    return hashlib.sha256(hashlib.sha256(payload).digest()).digest()


def hash160(data: bytes) -> bytes:
    """``RIPEMD160(SHA256(data))``."""
    return RIPEMD160.new(hashlib.sha256(data).digest()).digest()


def _serialize_public_key(key: VerifyingKey, compressed: bool) -> bytes:
    return key.to_string("compressed" if compressed else "uncompressed")


# ── Keys and addresses ────────────────────────────────────────────────────────


def generate_private_key() -> bytes:
    """Return a fresh random 32-byte secp256k1 private key."""
    return SigningKey.generate(curve=SECP256k1).to_string()


def public_key_to_address(public_key: bytes, testnet: bool = False) -> str:
    """Encode a serialized public key as a Base58Check P2PKH address."""
    version = TESTNET_P2PKH if testnet else MAINNET_P2PKH
    return base58.b58encode_check(bytes([version]) + hash160(public_key)).decode("ascii")


def address_from_private_key(
    private_key: bytes, compressed: bool = True, testnet: bool = False
) -> str:
    """Derive the P2PKH address controlled by ``private_key``."""
    signing_key = SigningKey.from_string(private_key, curve=SECP256k1)
    public_key = _serialize_public_key(signing_key.get_verifying_key(), compressed)
    return public_key_to_address(public_key, testnet=testnet)


def private_key_to_wif(private_key: bytes, compressed: bool = True, testnet: bool = False) -> str:
    """Encode a private key in Wallet Import Format."""
    payload = bytes([TESTNET_WIF if testnet else MAINNET_WIF]) + private_key
    if compressed:
        payload += b"\x01"
    return base58.b58encode_check(payload).decode("ascii")


def wif_to_private_key(wif: str) -> tuple[bytes, bool, bool]:
    """Decode a WIF string.

    Returns:
        ``(private_key, compressed, testnet)``.

    Raises:
        ValueError: If the checksum, version byte or length is wrong.
    """
    payload = base58.b58decode_check(wif)
    if not payload:
        raise ValueError("WIF payload is empty")
    if payload[0] not in (MAINNET_WIF, TESTNET_WIF):
        raise ValueError(f"Unknown WIF version byte 0x{payload[0]:02x}")
    testnet = payload[0] == TESTNET_WIF
    body = payload[1:]
    if len(body) == 33 and body[-1] == 0x01:
        return body[:32], True, testnet
    if len(body) == 32:
        return body, False, testnet
    raise ValueError("WIF payload has an invalid length")


def _address_hash160(address: str) -> bytes | None:
    """Return the 20-byte key hash of a P2PKH address, or ``None``."""
    try:
        payload = base58.b58decode_check(address)
    except ValueError:
        return None
    if len(payload) != 21 or payload[0] not in _P2PKH_VERSIONS:
        return None
    return payload[1:]


# ── Sign / verify ─────────────────────────────────────────────────────────────


def sign_message(private_key: bytes, message: str, compressed: bool = True) -> str:
    """Sign ``message`` and return the base64 compact signature.

    Signing is deterministic (RFC 6979) and produces low-S values.
    """
    signing_key = SigningKey.from_string(private_key, curve=SECP256k1)
    digest = message_digest(message)
    raw = signing_key.sign_digest_deterministic(
        digest, hashfunc=hashlib.sha256, sigencode=sigencode_string_canonize
    )

    expected = signing_key.get_verifying_key().to_string()
    candidates = VerifyingKey.from_public_key_recovery_with_digest(
        raw, digest, SECP256k1, hashfunc=hashlib.sha256, sigdecode=sigdecode_string
    )
    for recid, candidate in enumerate(candidates):
        if candidate.to_string() == expected:
            break
    else:  # pragma: no cover - recovery always yields the signer's key
        raise ValueError("Could not determine the recovery id for this signature")

    header = (_HEADER_COMPRESSED if compressed else _HEADER_UNCOMPRESSED) + recid
    return base64.b64encode(bytes([header]) + raw).decode("ascii")


def verify_message(message: str, address: str, signature: str) -> bool:
    """Return ``True`` iff ``signature`` over ``message`` was made by ``address``.

    Never raises: malformed signatures, unsupported headers and undecodable
    addresses all verify as ``False``.
    """
    expected_hash = _address_hash160(address)
    if expected_hash is None:
        logger.debug("verify_message: %r is not a P2PKH address", address)
        return False

    try:
        raw = base64.b64decode(signature, validate=True)
    except (ValueError, TypeError):
        return False
    if len(raw) != _SIGNATURE_LENGTH:
        return False

    header = raw[0]
    if _HEADER_UNCOMPRESSED <= header < _HEADER_COMPRESSED:
        compressed = False
        recid = header - _HEADER_UNCOMPRESSED
    elif _HEADER_COMPRESSED <= header < _HEADER_COMPRESSED + 4:
        compressed = True
        recid = header - _HEADER_COMPRESSED
    else:
        return False
    if recid > 1:
        # recid 2/3 (r >= n) never occur for secp256k1 in practice.
        return False

    try:
        candidates = VerifyingKey.from_public_key_recovery_with_digest(
            raw[1:],
            message_digest(message),
            SECP256k1,
            hashfunc=hashlib.sha256,
            sigdecode=sigdecode_string,
        )
        public_key = _serialize_public_key(candidates[recid], compressed)
    except Exception as exc:  # ecdsa raises several unrelated types for bad points
        logger.debug("verify_message: public key recovery failed: %s", exc)
        return False

    return hash160(public_key) == expected_hash
