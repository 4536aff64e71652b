"""
Command-line interface for the Star Registry.

Provides CLI commands for running the service and for working with local
development wallets:
- run: Start the HTTP API
- keygen: Create a private key (WIF) and its P2PKH address
- sign: Sign a challenge message with a WIF private key
- verify: Check a signature against an address
- config: Print the effective configuration

Usage:
    star-registry run [--host HOST] [--port PORT]
    star-registry keygen [--testnet] [--uncompressed]
    star-registry sign --wif WIF MESSAGE
    star-registry verify ADDRESS MESSAGE SIGNATURE
    star-registry config

Environment Variables:
    STAR_HOST: Host to bind the API server (default: 127.0.0.1)
    STAR_PORT: Port for the API server (default: 8000)
    STAR_LOG_LEVEL: Root log level (default: INFO)
    STAR_CHALLENGE_WINDOW_SECONDS: Challenge validity window (default: 300)
"""

import argparse
import sys

from star_registry import __version__


def cmd_run(args: argparse.Namespace) -> int:
    """
    Run the HTTP API in the foreground.

    Configuration priority: CLI arguments, then environment variables, then
    config/server.ini, then defaults.

    Returns:
        0 on clean shutdown (Ctrl+C), 1 on startup error
    """
    from star_registry.api.server import start_server
    from star_registry.config import config
    from star_registry.logging_setup import configure_logging

    configure_logging(config.logging)

    try:
        start_server(host=getattr(args, "host", None), port=getattr(args, "port", None))
        return 0
    except KeyboardInterrupt:
        print("\nServer stopped.")
        return 0
    except Exception as e:
        print(f"Error starting server: {e}", file=sys.stderr)
        return 1


def cmd_keygen(args: argparse.Namespace) -> int:
    """
    Generate a development key pair.

    Prints the WIF private key and the matching P2PKH address.

    Returns:
        0 always
    """
    from star_registry.crypto import (
        address_from_private_key,
        generate_private_key,
        private_key_to_wif,
    )

    compressed = not getattr(args, "uncompressed", False)
    testnet = getattr(args, "testnet", False)

    private_key = generate_private_key()
    print(f"Address: {address_from_private_key(private_key, compressed, testnet)}")
    print(f"WIF:     {private_key_to_wif(private_key, compressed, testnet)}")
    return 0


def cmd_sign(args: argparse.Namespace) -> int:
    """
    Sign a message with a WIF private key.

    The key's compression flag decides the signature header, so the result
    verifies against the address ``keygen`` printed for the same key.

    Returns:
        0 on success, 1 if the WIF cannot be decoded
    """
    from star_registry.crypto import sign_message, wif_to_private_key

    try:
        private_key, compressed, _testnet = wif_to_private_key(args.wif)
    except ValueError as e:
        print(f"Error: invalid WIF key: {e}", file=sys.stderr)
        return 1

    print(sign_message(private_key, args.message, compressed=compressed))
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    """
    Verify a message signature.

    Returns:
        0 if the signature is valid for the address, 1 otherwise
    """
    from star_registry.crypto import verify_message

    if verify_message(args.message, args.address, args.signature):
        print("Signature is valid.")
        return 0
    print("Signature is NOT valid.", file=sys.stderr)
    return 1


def cmd_config(args: argparse.Namespace) -> int:
    """Print the configuration summary."""
    from star_registry.config import print_config_summary

    print_config_summary()
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="star-registry",
        description="Star Registry - a tamper-evident ledger of star ownership claims",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # run command
    run_parser = subparsers.add_parser(
        "run",
        help="Start the HTTP API",
        description="Start the HTTP API with a fresh in-memory chain.",
    )
    run_parser.add_argument("--host", type=str, default=None, help="Host to bind")
    run_parser.add_argument("--port", type=int, default=None, help="Port to bind")
    run_parser.set_defaults(func=cmd_run)

    # keygen command
    keygen_parser = subparsers.add_parser(
        "keygen",
        help="Generate a development wallet key",
    )
    keygen_parser.add_argument(
        "--testnet", action="store_true", help="Use testnet address/WIF version bytes"
    )
    keygen_parser.add_argument(
        "--uncompressed", action="store_true", help="Use an uncompressed public key"
    )
    keygen_parser.set_defaults(func=cmd_keygen)

    # sign command
    sign_parser = subparsers.add_parser("sign", help="Sign a message with a WIF key")
    sign_parser.add_argument("--wif", required=True, help="Private key in Wallet Import Format")
    sign_parser.add_argument("message", help="Message to sign (e.g. a challenge)")
    sign_parser.set_defaults(func=cmd_sign)

    # verify command
    verify_parser = subparsers.add_parser("verify", help="Verify a message signature")
    verify_parser.add_argument("address", help="P2PKH address of the signer")
    verify_parser.add_argument("message", help="Message that was signed")
    verify_parser.add_argument("signature", help="Base64 compact signature")
    verify_parser.set_defaults(func=cmd_verify)

    # config command
    config_parser = subparsers.add_parser("config", help="Print the effective configuration")
    config_parser.set_defaults(func=cmd_config)

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
