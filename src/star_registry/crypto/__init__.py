"""Wallet cryptography: Bitcoin message signatures and P2PKH addresses."""

from star_registry.crypto.bitcoin_message import (
    address_from_private_key,
    generate_private_key,
    private_key_to_wif,
    sign_message,
    verify_message,
    wif_to_private_key,
)

__all__ = [
    "address_from_private_key",
    "generate_private_key",
    "private_key_to_wif",
    "sign_message",
    "verify_message",
    "wif_to_private_key",
]
