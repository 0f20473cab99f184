"""
Monero RPC Client TOML Configuration Loader

Loads the daemon and wallet endpoint sections of monero_rpc.toml with
environment variable overrides.

Example file:

    [daemon]
    url = "http://127.0.0.1:18081"

    [wallet]
    url = "http://127.0.0.1:18083"
    timeout = 30.0

Environment variable mapping:
    [daemon] url  → MONERO_DAEMON_URL
    [wallet] url  → MONERO_WALLET_URL
    timeout       → MONERO_RPC_TIMEOUT (both endpoints)

Credentials for ``--rpc-login`` MUST come from env vars
(MONERO_RPC_USERNAME / MONERO_RPC_PASSWORD), never TOML.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomllib as tomli  # Python 3.11+
except ImportError:
    try:
        import tomli  # type: ignore[no-redef]
    except ImportError:
        tomli = None  # type: ignore[assignment]

import httpx

from ..constants import JSON_RPC_ENDPOINT, MONERO_DAEMON_URL, MONERO_WALLET_URL
from ..exceptions import ConfigurationError
from ..logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_FILE = "monero_rpc.toml"


def _parse_timeout(value: Any, source: str) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{source}: invalid timeout {value!r}") from exc
    if timeout <= 0:
        raise ConfigurationError(f"{source}: timeout must be positive, got {timeout}")
    return timeout


# ---------------------------------------------------------------------------
# Endpoint sections
# ---------------------------------------------------------------------------


@dataclass
class EndpointConfig:
    """[daemon] or [wallet] section."""
    url: str = ""
    endpoint: str = JSON_RPC_ENDPOINT
    timeout: Optional[float] = None
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_url: str = "") -> "EndpointConfig":
        if "username" in data or "password" in data:
            logger.warning("Ignoring credentials in config file; use MONERO_RPC_USERNAME/MONERO_RPC_PASSWORD")
        return cls(
            url=data.get("url", default_url),
            endpoint=data.get("endpoint", JSON_RPC_ENDPOINT),
            timeout=_parse_timeout(data.get("timeout"), "timeout"),
        )

    def apply_env(self, url_var: str) -> None:
        """Override from environment variables."""
        if v := os.environ.get(url_var):
            self.url = v
        if v := os.environ.get("MONERO_RPC_TIMEOUT"):
            self.timeout = _parse_timeout(v, "MONERO_RPC_TIMEOUT")
        if v := os.environ.get("MONERO_RPC_USERNAME"):
            self.username = v
        if v := os.environ.get("MONERO_RPC_PASSWORD"):
            self.password = v

    @property
    def auth(self) -> Optional[httpx.Auth]:
        """Digest credentials as expected by ``--rpc-login``, if configured."""
        if self.username is None:
            return None
        return httpx.DigestAuth(self.username, self.password or "")


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


@dataclass
class ClientConfig:
    """Complete client configuration."""
    daemon: EndpointConfig = field(default_factory=lambda: EndpointConfig(url=str(MONERO_DAEMON_URL)))
    wallet: EndpointConfig = field(default_factory=lambda: EndpointConfig(url=str(MONERO_WALLET_URL)))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientConfig":
        return cls(
            daemon=EndpointConfig.from_dict(data.get("daemon", {}), str(MONERO_DAEMON_URL)),
            wallet=EndpointConfig.from_dict(data.get("wallet", {}), str(MONERO_WALLET_URL)),
        )

    def apply_env(self) -> None:
        self.daemon.apply_env("MONERO_DAEMON_URL")
        self.wallet.apply_env("MONERO_WALLET_URL")

    @classmethod
    def from_file(cls, config_path: str) -> "ClientConfig":
        """
        Load configuration from a TOML file.

        Args:
            config_path: Path to monero_rpc.toml

        Returns:
            ClientConfig instance
        """
        if tomli is None:
            raise ImportError(
                "tomli is required for TOML config loading. "
                "Install it: pip install tomli"
            )

        path = Path(config_path)
        if not path.exists():
            logger.debug(f"Config file not found: {config_path}, using defaults")
            cfg = cls()
            cfg.apply_env()
            return cfg

        try:
            with open(path, "rb") as f:
                raw = tomli.load(f)
        except tomli.TOMLDecodeError as exc:
            raise ConfigurationError(f"invalid TOML in {config_path}: {exc}") from exc

        cfg = cls.from_dict(raw)
        cfg.apply_env()
        logger.info(f"Loaded config from {config_path}")
        return cfg


def load_config(path: Optional[str] = None) -> ClientConfig:
    """
    Load client configuration.

    Resolution order:
        1. Explicit *path* argument
        2. MONERO_RPC_CONFIG env var
        3. ./monero_rpc.toml in current directory
        4. Defaults (with env overrides)
    """
    if path is None:
        path = os.environ.get("MONERO_RPC_CONFIG", DEFAULT_CONFIG_FILE)

    return ClientConfig.from_file(path)
