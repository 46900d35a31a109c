"""Compiled artifact lookup and parsing for points-deployer."""

import json
from pathlib import Path
from typing import Any, Dict, List

from eth_utils import to_bytes

from .constants import ARTIFACT_FORMAT
from .exceptions import ArtifactNotFoundError, DefectiveArtifactError
from .paths import get_artifact_path
from .types import ContractArtifact

# Directories under the artifacts root that never hold contract artifacts
_NON_CONTRACT_DIRS = {"build-info", "cache"}


def parse_artifact(file_path: Path) -> ContractArtifact:
    """
    Parse a hardhat artifact JSON file.

    Args:
        file_path: Path to {Contract}.json inside the artifacts tree

    Returns:
        ContractArtifact with decoded bytecode

    Raises:
        DefectiveArtifactError: If required fields are missing or malformed
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DefectiveArtifactError(f"Invalid JSON in artifact {file_path}: {e}") from e
    except OSError as e:
        raise DefectiveArtifactError(f"Cannot read artifact {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise DefectiveArtifactError(f"Artifact {file_path} is not a JSON object")

    # Older toolchains omit the marker; anything else is a different format
    artifact_format = data.get("_format", ARTIFACT_FORMAT)
    if artifact_format != ARTIFACT_FORMAT:
        raise DefectiveArtifactError(
            f"Unsupported artifact format '{artifact_format}' in {file_path}"
        )

    for required in ("contractName", "abi", "bytecode"):
        if required not in data:
            raise DefectiveArtifactError(
                f"Missing '{required}' in artifact file: {file_path}"
            )

    link_references = data.get("linkReferences") or {}
    if link_references:
        libraries: Dict[str, Any] = {}
        for source_libraries in link_references.values():
            libraries.update(source_libraries)
        raise DefectiveArtifactError(
            f"Contract '{data['contractName']}' needs linked libraries: "
            f"{', '.join(sorted(libraries))}"
        )

    if not isinstance(data["abi"], list):
        raise DefectiveArtifactError(f"'abi' must be a list in artifact file: {file_path}")

    return ContractArtifact(
        name=data["contractName"],
        abi=data["abi"],
        bytecode=_decode_bytecode(data["bytecode"], "bytecode", file_path),
        source_name=data.get("sourceName"),
        deployed_bytecode=(
            _decode_bytecode(data["deployedBytecode"], "deployedBytecode", file_path)
            if "deployedBytecode" in data
            else None
        ),
        path=file_path,
    )


def _decode_bytecode(value: Any, field_name: str, file_path: Path) -> bytes:
    if not isinstance(value, str):
        raise DefectiveArtifactError(f"'{field_name}' must be a hex string in {file_path}")
    try:
        return to_bytes(hexstr=value)
    except ValueError as e:
        raise DefectiveArtifactError(f"'{field_name}' in {file_path} is not valid hex") from e


def list_artifact_files(artifacts_dir: Path) -> List[Path]:
    """
    List contract artifact files under an artifacts directory.

    Skips build-info, debug files (*.dbg.json) and other non-contract output.

    Args:
        artifacts_dir: Root artifacts directory

    Returns:
        Sorted list of artifact paths
    """
    if not artifacts_dir.is_dir():
        return []

    result = []
    for candidate in artifacts_dir.rglob("*.json"):
        if not candidate.is_file():
            continue
        relative = candidate.relative_to(artifacts_dir)
        if relative.parts[0] in _NON_CONTRACT_DIRS:
            continue
        if candidate.name.endswith(".dbg.json"):
            continue
        # Contract artifacts live in a "<File>.sol" directory
        if not candidate.parent.name.endswith(".sol"):
            continue
        result.append(candidate)
    return sorted(result)


def find_artifact(name: str, artifacts_dir: Path) -> ContractArtifact:
    """
    Resolve a contract name to its compiled artifact.

    Accepts a bare name ("PointsOption") or a fully qualified name
    ("contracts/PointsOption.sol:PointsOption").

    Args:
        name: Contract name
        artifacts_dir: Root artifacts directory

    Returns:
        ContractArtifact

    Raises:
        ArtifactNotFoundError: If no artifact exists for the name
        DefectiveArtifactError: If a bare name matches several artifacts
                                or the artifact file is malformed
    """
    if ":" in name:
        source_name, contract_name = name.rsplit(":", 1)
        path = get_artifact_path(artifacts_dir, source_name, contract_name)
        if not path.resolve().is_relative_to(artifacts_dir.resolve()):
            raise ArtifactNotFoundError(
                f"Contract name '{name}' points outside the artifacts directory {artifacts_dir}"
            )
        if not path.is_file():
            raise ArtifactNotFoundError(
                f"Artifact for contract '{name}' not found at {path}. "
                "Compile the contracts first."
            )
        return parse_artifact(path)

    matches = [p for p in list_artifact_files(artifacts_dir) if p.stem == name]
    if not matches:
        raise ArtifactNotFoundError(
            f"Artifact for contract '{name}' not found in {artifacts_dir}. "
            "Compile the contracts first."
        )
    if len(matches) > 1:
        candidates = ", ".join(
            f"{p.parent.relative_to(artifacts_dir).as_posix()}:{name}" for p in matches
        )
        raise DefectiveArtifactError(
            f"Contract name '{name}' is ambiguous; use a fully qualified name: {candidates}"
        )
    return parse_artifact(matches[0])


def artifact_names(artifacts_dir: Path) -> List[str]:
    """
    Get the names of all compiled contracts.

    Args:
        artifacts_dir: Root artifacts directory

    Returns:
        Sorted list of contract names (may contain duplicates across sources)
    """
    return sorted(p.stem for p in list_artifact_files(artifacts_dir))


def check_deployable(artifact: ContractArtifact) -> None:
    """
    Ensure an artifact can be deployed without extra input.

    Raises:
        DefectiveArtifactError: If bytecode is empty (abstract contract or
                                interface) or the constructor takes parameters
    """
    if not artifact.bytecode:
        raise DefectiveArtifactError(
            f"Contract '{artifact.name}' has no creation bytecode "
            "(abstract contract or interface?)"
        )
    inputs = artifact.constructor_inputs()
    if inputs:
        signature = ", ".join(f"{i.get('type')} {i.get('name', '')}".strip() for i in inputs)
        raise DefectiveArtifactError(
            f"Contract '{artifact.name}' constructor takes arguments ({signature}); "
            "only argument-free constructors can be deployed"
        )
