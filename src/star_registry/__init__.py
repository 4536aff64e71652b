"""Star Registry — a tamper-evident ledger of star ownership claims.

Each block binds a wallet address to caller-supplied star metadata through a
signed, time-boxed ownership challenge.  Blocks are hash-linked so that any
later edit, reordering, or splice of the chain is detected by the validator.

Version Management
------------------
``__version__`` is read from the installed package metadata at import time.
The single source of truth is the ``version`` field in ``pyproject.toml``.
The API server and the CLI import ``__version__`` from here.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ---------------------------------------------------------------------------
# Package version, read from pyproject.toml via importlib.metadata.
#
# When the package is installed (``pip install -e .``), importlib.metadata
# resolves the version from the distribution metadata that pip wrote.  If
# the package is imported without being installed we fall back to a dev
# marker so the application can still start.
# ---------------------------------------------------------------------------
try:
    __version__: str = version("star-registry")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
