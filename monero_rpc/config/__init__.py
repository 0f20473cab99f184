"""
Monero RPC Client Configuration

TOML file loading with environment variable overrides.
"""

from .loader import ClientConfig, EndpointConfig, load_config

__all__ = ["ClientConfig", "EndpointConfig", "load_config"]
