"""Configuration loading and validation for points-deployer."""

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlparse

from eth_account import Account
from eth_utils import to_hex

from .constants import CREDENTIAL_ENV_PREFIX, DEFAULT_CONFIG, NETWORK_PROFILE_KEYS
from .exceptions import ConfigurationError, CredentialError, NetworkNotFoundError
from .paths import get_default_config_path, get_project_root, resolve_project_path
from .types import DeployerConfig, NetworkProfile

logger = logging.getLogger(__name__)

_SOLIDITY_VERSION_RE = re.compile(r"^\d+\.\d+\.\d+$")
_ENV_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def load_config(config_path: Optional[Union[Path, str]] = None) -> DeployerConfig:
    """
    Load project configuration.

    Falls back to the built-in configuration when the default config file
    does not exist. An explicitly given path must exist.

    Args:
        config_path: Path to deployer.config.json
                     If None, uses ./deployer.config.json

    Returns:
        Validated DeployerConfig

    Raises:
        ConfigurationError: If the file is unreadable or invalid
    """
    explicit = config_path is not None
    if config_path is None:
        config_path = get_default_config_path()

    path = Path(config_path)
    root = get_project_root(path)

    if not path.exists():
        if explicit:
            raise ConfigurationError(f"Configuration file not found at {path}")
        logger.debug("No config at %s, using built-in configuration", path)
        return parse_config(DEFAULT_CONFIG, root)

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    logger.debug("Loaded configuration from %s", path)
    return parse_config(data, root)


def parse_config(data: Any, root: Path) -> DeployerConfig:
    """
    Validate raw configuration data and build a DeployerConfig.

    Args:
        data: Decoded configuration (hardhat-shaped dict)
        root: Directory relative paths resolve against

    Returns:
        DeployerConfig

    Raises:
        ConfigurationError: If any field is missing or malformed
    """
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a JSON object")

    solidity = data.get("solidity")
    if not isinstance(solidity, str) or not _SOLIDITY_VERSION_RE.match(solidity):
        raise ConfigurationError(
            f"'solidity' must be a compiler version like '0.8.20', got {solidity!r}"
        )

    paths = data.get("paths", {})
    if not isinstance(paths, dict):
        raise ConfigurationError("'paths' must be an object")
    sources = paths.get("sources", "./contracts")
    artifacts = paths.get("artifacts", "./artifacts")
    for key, value in (("sources", sources), ("artifacts", artifacts)):
        if not isinstance(value, str) or not value:
            raise ConfigurationError(f"'paths.{key}' must be a non-empty string")

    raw_networks = data.get("networks")
    if not isinstance(raw_networks, dict) or not raw_networks:
        raise ConfigurationError("'networks' must be a non-empty object")

    networks = {
        name: parse_network_profile(name, entry) for name, entry in raw_networks.items()
    }

    default_network = data.get("defaultNetwork")
    if default_network is None:
        raise ConfigurationError("'defaultNetwork' is required")
    if default_network not in networks:
        raise ConfigurationError(
            f"'defaultNetwork' is '{default_network}' but no such network is configured"
        )

    return DeployerConfig(
        solidity_version=solidity,
        sources_dir=resolve_project_path(root, sources),
        artifacts_dir=resolve_project_path(root, artifacts),
        networks=networks,
        default_network=default_network,
    )


def parse_network_profile(name: str, entry: Any) -> NetworkProfile:
    """
    Validate one entry of the 'networks' object.

    Every field is required. Unknown fields are rejected rather than ignored.

    Args:
        name: Profile name
        entry: Raw profile dict with url, accounts and gasPrice

    Returns:
        NetworkProfile

    Raises:
        ConfigurationError: If the profile is malformed
    """
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Network '{name}' must be an object")

    unknown = sorted(set(entry) - set(NETWORK_PROFILE_KEYS))
    if unknown:
        raise ConfigurationError(
            f"Network '{name}' has unknown field(s): {', '.join(unknown)}"
        )
    missing = [key for key in NETWORK_PROFILE_KEYS if key not in entry]
    if missing:
        raise ConfigurationError(
            f"Network '{name}' is missing field(s): {', '.join(missing)}"
        )

    url = entry["url"]
    parsed = urlparse(url) if isinstance(url, str) else None
    if parsed is None or parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(f"Network '{name}' has invalid url: {url!r}")

    accounts = entry["accounts"]
    if not isinstance(accounts, list) or len(accounts) != 1:
        raise ConfigurationError(
            f"Network '{name}' must list exactly one account credential"
        )
    credential = accounts[0]
    if (
        not isinstance(credential, str)
        or not credential.startswith(CREDENTIAL_ENV_PREFIX)
        or not _ENV_NAME_RE.match(credential[len(CREDENTIAL_ENV_PREFIX):])
    ):
        raise ConfigurationError(
            f"Network '{name}' credential must look like "
            f"'{CREDENTIAL_ENV_PREFIX}VARIABLE', got {credential!r}"
        )

    gas_price = entry["gasPrice"]
    # bool is an int subclass
    if isinstance(gas_price, bool) or not isinstance(gas_price, int) or gas_price < 0:
        raise ConfigurationError(
            f"Network '{name}' gasPrice must be a non-negative integer, got {gas_price!r}"
        )

    return NetworkProfile(
        name=name,
        url=url,
        credential=credential,
        gas_price_wei=gas_price,
    )


def select_profile(config: DeployerConfig, network: Optional[str] = None) -> NetworkProfile:
    """
    Pick the active network profile.

    Args:
        config: Project configuration
        network: Explicit profile name (defaults to config.default_network)

    Returns:
        NetworkProfile

    Raises:
        NetworkNotFoundError: If the profile is not configured
    """
    if network is None:
        network = config.default_network

    if network not in config.networks:
        available = ", ".join(sorted(config.networks))
        raise NetworkNotFoundError(
            f"Network '{network}' not configured (available: {available})"
        )
    return config.networks[network]


def resolve_credential(
    profile: NetworkProfile, environ: Optional[Mapping[str, str]] = None
) -> str:
    """
    Resolve a profile's credential reference to a hex private key.

    Args:
        profile: Network profile
        environ: Environment to read from (defaults to os.environ)

    Returns:
        Private key as 0x-prefixed hex

    Raises:
        CredentialError: If the variable is unset, empty, or not a valid key
    """
    if environ is None:
        environ = os.environ

    variable = profile.credential[len(CREDENTIAL_ENV_PREFIX):]
    value = environ.get(variable, "").strip()
    if not value:
        raise CredentialError(
            f"Signing key for network '{profile.name}' not set: "
            f"environment variable {variable} is empty or missing"
        )

    try:
        account = Account.from_key(value)
    except (ValueError, TypeError) as e:
        # Do not echo the key material
        raise CredentialError(
            f"Environment variable {variable} does not hold a valid private key"
        ) from e

    return to_hex(account.key)


def describe_networks(config: DeployerConfig) -> Dict[str, Dict[str, Any]]:
    """
    Summarize configured profiles without resolving any secrets.

    Returns:
        Mapping of profile name -> {url, gas_price_wei, credential, default}
    """
    return {
        name: {
            "url": profile.url,
            "gas_price_wei": profile.gas_price_wei,
            "credential": profile.credential,
            "default": name == config.default_network,
        }
        for name, profile in sorted(config.networks.items())
    }
