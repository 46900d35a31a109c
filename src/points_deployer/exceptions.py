"""Custom exception classes for points-deployer."""


class DeployerError(Exception):
    """Base exception for deployment-related errors."""

    pass


class ConfigurationError(DeployerError, ValueError):
    """Raised when the project configuration is malformed."""

    pass


class NetworkNotFoundError(DeployerError, ValueError):
    """Raised when the requested network profile is not configured."""

    pass


class CredentialError(DeployerError, ValueError):
    """Raised when a signing credential is missing or not a usable private key."""

    pass


class ArtifactNotFoundError(DeployerError, FileNotFoundError):
    """Raised when the named contract has no compiled artifact."""

    pass


class DefectiveArtifactError(DeployerError, ValueError):
    """Raised when an artifact is malformed, ambiguous or cannot be deployed as-is."""

    pass


class NetworkError(DeployerError, ConnectionError):
    """Raised when the RPC endpoint is unreachable or rejects a request."""

    pass


class RevertError(DeployerError, RuntimeError):
    """Raised when the deployment transaction reverts."""

    pass
