"""Composition helpers for running the gateway.

Resolves configuration and wires up the server so callers don't have to.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml
from dotenv import find_dotenv, load_dotenv

from gembridge.gateway.clients.gemini_client import DEFAULT_BASE_URL
from gembridge.gateway.server import GatewayConfig, GatewayServer

logger = logging.getLogger(__name__)

CONFIG_ENV_KEY = "GEMBRIDGE_CONFIG"


async def _load_config_file(
    config_file: str | None,
    env_config_key: str = CONFIG_ENV_KEY,
) -> tuple[dict[str, Any], Callable[[Any, str, str, str], str]]:
    """Load the YAML config file and return (file_config, get_value_fn).

    Args:
        config_file: Path to config file, or None to check env var.
        env_config_key: Environment variable name for config path.

    Returns:
        Tuple of (file_config dict, get_value function).
        The get_value function resolves config values with priority:
        arg > env > file > default.
    """
    file_config: dict[str, Any] = {}
    config_path = config_file or os.environ.get(env_config_key)
    if config_path:
        try:
            content = await asyncio.to_thread(Path(config_path).read_text)
        except FileNotFoundError:
            logger.warning("Config file %s not found, ignoring", config_path)
        else:
            loaded = yaml.safe_load(content) or {}
            if not isinstance(loaded, dict):
                raise ValueError(f"Config file {config_path} must contain a mapping")
            file_config = loaded

    def get_value(arg: Any, env_key: str, file_key: str, default: str) -> str:
        if arg is not None:
            return str(arg)
        env_val = os.environ.get(env_key)
        if env_val:
            return env_val
        file_val = file_config.get(file_key)
        if file_val:
            return str(file_val)
        return default

    return file_config, get_value


async def load_gateway_config(
    host: str | None = None,
    port: int | None = None,
    api_key: str | None = None,
    base_url: str | None = None,
    static_dir: str | None = None,
    debug_dir: str | None = None,
    config_file: str | None = None,
    use_dotenv: bool = True,
) -> GatewayConfig:
    """Resolve gateway configuration.

    Configuration priority:
    1. Function arguments (highest)
    2. Environment variables (a .env file in the working directory is loaded first)
    3. YAML config file (config_file or GEMBRIDGE_CONFIG env var)
    4. Defaults

    A missing API key is allowed here; requests will fail with a
    configuration error instead.

    Args:
        host: Host to bind to (or GATEWAY_HOST env var).
        port: Port to bind to (or GATEWAY_PORT env var).
        api_key: Gemini API key (or GEMINI_API_KEY env var).
        base_url: Gemini models URL (or GEMINI_BASE_URL env var).
        static_dir: Static asset root (or GATEWAY_STATIC_DIR env var).
        debug_dir: Debug dump directory (or GEMBRIDGE_DEBUG_DIR env var).
        config_file: Path to YAML config (or GEMBRIDGE_CONFIG env var).
        use_dotenv: Load a .env file from the working directory.
    """
    if use_dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    _, get_value = await _load_config_file(config_file)

    port_value = get_value(port, "GATEWAY_PORT", "port", "3000")
    try:
        resolved_port = int(port_value)
    except ValueError as e:
        raise ValueError(f"port must be an integer, got: {port_value!r}") from e

    return GatewayConfig(
        host=get_value(host, "GATEWAY_HOST", "host", "127.0.0.1"),
        port=resolved_port,
        api_key=get_value(api_key, "GEMINI_API_KEY", "api_key", "") or None,
        base_url=get_value(base_url, "GEMINI_BASE_URL", "base_url", DEFAULT_BASE_URL),
        static_dir=get_value(static_dir, "GATEWAY_STATIC_DIR", "static_dir", "") or None,
        debug_dir=get_value(debug_dir, "GEMBRIDGE_DEBUG_DIR", "debug_dir", "") or None,
    )


async def create_gateway(
    host: str | None = None,
    port: int | None = None,
    api_key: str | None = None,
    base_url: str | None = None,
    static_dir: str | None = None,
    debug_dir: str | None = None,
    config_file: str | None = None,
) -> None:
    """Create and run the gateway server.

    This is a convenience function that blocks until stopped. See
    load_gateway_config for how each setting is resolved.

    Example:
        >>> # Using environment variables
        >>> # export GEMINI_API_KEY=AIza...
        >>> await create_gateway()
        >>>
        >>> # Or with explicit arguments
        >>> await create_gateway(api_key="AIza...", port=8080)
    """
    config = await load_gateway_config(
        host=host,
        port=port,
        api_key=api_key,
        base_url=base_url,
        static_dir=static_dir,
        debug_dir=debug_dir,
        config_file=config_file,
    )
    server = GatewayServer(config=config)
    await server.serve()
