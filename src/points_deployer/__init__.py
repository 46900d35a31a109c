"""
points-deployer: deploy compiled hardhat contracts to EVM networks
"""

from importlib.metadata import PackageNotFoundError, version

from .artifacts import find_artifact, parse_artifact
from .config import load_config, resolve_credential, select_profile
from .deployer import deploy, deploy_by_name
from .exceptions import (
    ArtifactNotFoundError,
    ConfigurationError,
    CredentialError,
    DefectiveArtifactError,
    DeployerError,
    NetworkError,
    NetworkNotFoundError,
    RevertError,
)
from .types import ContractArtifact, DeployerConfig, DeploymentResult, NetworkProfile

try:
    __version__ = version("points-deployer")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "deploy",
    "deploy_by_name",
    "find_artifact",
    "parse_artifact",
    "load_config",
    "select_profile",
    "resolve_credential",
    "ContractArtifact",
    "DeployerConfig",
    "DeploymentResult",
    "NetworkProfile",
    "DeployerError",
    "ConfigurationError",
    "NetworkNotFoundError",
    "CredentialError",
    "ArtifactNotFoundError",
    "DefectiveArtifactError",
    "NetworkError",
    "RevertError",
]
