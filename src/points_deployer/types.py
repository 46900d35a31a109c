"""Data types and dataclasses for points-deployer."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .exceptions import DeployerError


@dataclass(frozen=True)
class NetworkProfile:
    """Named bundle of endpoint, credential reference and fee parameters."""

    name: str  # e.g. "blast-local"
    url: str  # JSON-RPC endpoint
    credential: str  # Reference such as "env:PRIVATE_KEY", never the key itself
    gas_price_wei: int


@dataclass(frozen=True)
class ContractArtifact:
    """Compiled contract as produced by hardhat."""

    name: str  # e.g. "PointsOption"
    abi: List[Dict[str, Any]]
    bytecode: bytes  # Creation bytecode

    source_name: Optional[str] = None  # e.g. "contracts/PointsOption.sol"
    deployed_bytecode: Optional[bytes] = None
    path: Optional[Path] = None

    @property
    def fully_qualified_name(self) -> str:
        if self.source_name is None:
            return self.name
        return f"{self.source_name}:{self.name}"

    def constructor_inputs(self) -> List[Dict[str, Any]]:
        for item in self.abi:
            if item.get("type") == "constructor":
                return list(item.get("inputs", []))
        return []


@dataclass(frozen=True)
class DeploymentResult:
    """
    Outcome of one deployment attempt.

    Exactly one of ``contract_address`` and ``error`` is set.
    """

    contract_name: str
    network: str
    contract_address: Optional[str] = None
    error: Optional[DeployerError] = None

    # Only known once the transaction was submitted
    transaction_hash: Optional[str] = None
    block_number: Optional[int] = None
    gas_used: Optional[int] = None

    def __post_init__(self) -> None:
        if (self.contract_address is None) == (self.error is None):
            raise ValueError(
                "DeploymentResult needs exactly one of contract_address or error"
            )

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> Optional[str]:
        if self.error is None:
            return None
        return type(self.error).__name__


@dataclass(frozen=True)
class DeployerConfig:
    """Project configuration, built once at process start."""

    solidity_version: str
    sources_dir: Path
    artifacts_dir: Path
    networks: Dict[str, NetworkProfile]
    default_network: str
