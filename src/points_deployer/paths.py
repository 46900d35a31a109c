"""Path management utilities for points-deployer."""

from pathlib import Path
from typing import Optional, Union

from .constants import CONFIG_FILENAME, DOTENV_FILENAME


def get_default_config_path() -> Path:
    """
    Get default configuration file path.

    Returns:
        Path to ./deployer.config.json
    """
    return Path.cwd() / CONFIG_FILENAME


def get_project_root(config_path: Optional[Union[Path, str]] = None) -> Path:
    """
    Get the directory that relative project paths resolve against.

    Args:
        config_path: Configuration file (defaults to ./deployer.config.json)

    Returns:
        Absolute directory containing the configuration file
    """
    if config_path is None:
        config_path = get_default_config_path()
    return Path(config_path).absolute().parent


def get_dotenv_path(config_path: Optional[Union[Path, str]] = None) -> Path:
    """Get the .env file that sits next to the configuration file."""
    return get_project_root(config_path) / DOTENV_FILENAME


def resolve_project_path(root: Path, value: Union[Path, str]) -> Path:
    """
    Resolve a configured path against the project root.

    Args:
        root: Project root directory
        value: Absolute or root-relative path

    Returns:
        Absolute path
    """
    path = Path(value)
    if not path.is_absolute():
        path = root / path
    return path.absolute()


def get_artifact_path(artifacts_dir: Path, source_name: str, contract_name: str) -> Path:
    """
    Get the hardhat artifact file for a contract.

    Args:
        artifacts_dir: Root artifacts directory
        source_name: Source file, e.g. "contracts/PointsOption.sol"
        contract_name: Contract name, e.g. "PointsOption"

    Returns:
        Path to {artifacts_dir}/{source_name}/{contract_name}.json
    """
    return artifacts_dir / source_name / f"{contract_name}.json"
