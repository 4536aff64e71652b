"""
Unit tests for CLI module (star_registry/cli.py).

Tests cover:
- Command parsing
- run command (server start is patched out)
- keygen / sign / verify wallet helpers
- config command
"""

import argparse
from unittest.mock import patch

import pytest

from star_registry import cli
from star_registry.crypto import (
    address_from_private_key,
    private_key_to_wif,
    sign_message,
    verify_message,
    wif_to_private_key,
)

KEY = (0xC0FFEE).to_bytes(32, "big")
MESSAGE = "1BgGZ9tcN4rm9KBzDn7KprQz87SZ26SAMH:1000:starRegistry"

# ============================================================================
# RUN COMMAND TESTS
# ============================================================================


@pytest.mark.unit
def test_cmd_run_success():
    """Test run command starts the server with CLI overrides."""
    with patch("star_registry.logging_setup.configure_logging"):
        with patch("star_registry.api.server.start_server") as mock_start:
            args = argparse.Namespace(host="0.0.0.0", port=9000)
            result = cli.cmd_run(args)

            assert result == 0
            mock_start.assert_called_once_with(host="0.0.0.0", port=9000)


@pytest.mark.unit
def test_cmd_run_keyboard_interrupt():
    """Ctrl+C is a clean shutdown."""
    with patch("star_registry.logging_setup.configure_logging"):
        with patch("star_registry.api.server.start_server", side_effect=KeyboardInterrupt):
            assert cli.cmd_run(argparse.Namespace(host=None, port=None)) == 0


@pytest.mark.unit
def test_cmd_run_error(capsys):
    """Test run command reports startup errors."""
    with patch("star_registry.logging_setup.configure_logging"):
        with patch("star_registry.api.server.start_server", side_effect=OSError("port in use")):
            result = cli.cmd_run(argparse.Namespace(host=None, port=None))

    assert result == 1
    assert "port in use" in capsys.readouterr().err


# ============================================================================
# WALLET COMMAND TESTS
# ============================================================================


@pytest.mark.unit
def test_cmd_keygen_prints_matching_pair(capsys):
    result = cli.cmd_keygen(argparse.Namespace(testnet=False, uncompressed=False))

    assert result == 0
    lines = capsys.readouterr().out.splitlines()
    address = lines[0].split()[-1]
    wif = lines[1].split()[-1]
    private_key, compressed, testnet = wif_to_private_key(wif)
    assert compressed is True
    assert testnet is False
    assert address_from_private_key(private_key) == address


@pytest.mark.unit
def test_cmd_keygen_testnet_uncompressed(capsys):
    cli.cmd_keygen(argparse.Namespace(testnet=True, uncompressed=True))

    lines = capsys.readouterr().out.splitlines()
    _key, compressed, testnet = wif_to_private_key(lines[1].split()[-1])
    assert compressed is False
    assert testnet is True
    assert lines[0].split()[-1][0] in "mn"


@pytest.mark.unit
@pytest.mark.parametrize("compressed", [True, False])
def test_cmd_sign_honours_wif_compression(capsys, compressed):
    wif = private_key_to_wif(KEY, compressed=compressed)

    result = cli.cmd_sign(argparse.Namespace(wif=wif, message=MESSAGE))

    assert result == 0
    signature = capsys.readouterr().out.strip()
    address = address_from_private_key(KEY, compressed=compressed)
    assert verify_message(MESSAGE, address, signature) is True


@pytest.mark.unit
def test_cmd_sign_invalid_wif(capsys):
    result = cli.cmd_sign(argparse.Namespace(wif="not-a-wif", message=MESSAGE))

    assert result == 1
    assert "invalid WIF" in capsys.readouterr().err


@pytest.mark.unit
def test_cmd_verify_valid(capsys):
    args = argparse.Namespace(
        address=address_from_private_key(KEY),
        message=MESSAGE,
        signature=sign_message(KEY, MESSAGE),
    )

    assert cli.cmd_verify(args) == 0
    assert "Signature is valid." in capsys.readouterr().out


@pytest.mark.unit
def test_cmd_verify_invalid(capsys):
    args = argparse.Namespace(
        address=address_from_private_key(KEY),
        message=MESSAGE + "!",
        signature=sign_message(KEY, MESSAGE),
    )

    assert cli.cmd_verify(args) == 1
    assert "NOT valid" in capsys.readouterr().err


# ============================================================================
# MAIN FUNCTION TESTS
# ============================================================================


@pytest.mark.unit
def test_main_no_command(capsys):
    """Test main with no command shows help."""
    with patch("sys.argv", ["star-registry"]):
        result = cli.main()

    assert result == 1
    assert "usage" in capsys.readouterr().out.lower()


@pytest.mark.unit
def test_main_run():
    with patch("sys.argv", ["star-registry", "run", "--port", "9001"]):
        with patch("star_registry.logging_setup.configure_logging"):
            with patch("star_registry.api.server.start_server") as mock_start:
                result = cli.main()

    assert result == 0
    mock_start.assert_called_once_with(host=None, port=9001)


@pytest.mark.unit
def test_main_config(capsys):
    with patch("sys.argv", ["star-registry", "config"]):
        assert cli.main() == 0
    assert "STAR REGISTRY CONFIGURATION" in capsys.readouterr().out


@pytest.mark.unit
def test_main_version(capsys):
    with patch("sys.argv", ["star-registry", "--version"]):
        with pytest.raises(SystemExit) as exc_info:
            cli.main()

    assert exc_info.value.code == 0
    assert "star-registry" in capsys.readouterr().out


@pytest.mark.unit
def test_main_sign_requires_wif():
    with patch("sys.argv", ["star-registry", "sign", "hello"]):
        with pytest.raises(SystemExit) as exc_info:
            cli.main()

    assert exc_info.value.code == 2
