"""Contract deployment for points-deployer."""

import logging
import time
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from eth_account import Account
from eth_utils import to_checksum_address, to_hex

from . import rpc
from .artifacts import check_deployable, find_artifact
from .config import resolve_credential
from .constants import RECEIPT_POLL_INTERVAL_SECONDS
from .exceptions import DeployerError, NetworkError, RevertError
from .types import ContractArtifact, DeploymentResult, NetworkProfile

logger = logging.getLogger(__name__)


def deploy(
    artifact: ContractArtifact,
    profile: NetworkProfile,
    *,
    environ: Optional[Mapping[str, str]] = None,
    poll_interval: float = RECEIPT_POLL_INTERVAL_SECONDS,
) -> DeploymentResult:
    """
    Deploy a compiled contract to the network described by a profile.

    One attempt only. Blocks until the transaction is included in a block;
    there is no overall deadline on that wait.

    Calling this twice with the same inputs deploys two distinct contract
    instances at two different addresses.

    Args:
        artifact: Compiled contract to deploy
        profile: Active network profile
        environ: Environment the credential is resolved from (defaults to os.environ)
        poll_interval: Seconds between receipt polls

    Returns:
        DeploymentResult with either contract_address or error populated
    """
    submitted: Dict[str, Any] = {}
    try:
        address, block_number, gas_used = _submit_and_wait(
            artifact, profile, environ, poll_interval, submitted
        )
    except DeployerError as e:
        logger.info("Deployment of %s on %s failed: %s", artifact.name, profile.name, e)
        return DeploymentResult(
            contract_name=artifact.name,
            network=profile.name,
            error=e,
            transaction_hash=submitted.get("transaction_hash"),
        )

    logger.info("Deployed %s on %s at %s", artifact.name, profile.name, address)
    return DeploymentResult(
        contract_name=artifact.name,
        network=profile.name,
        contract_address=address,
        transaction_hash=submitted["transaction_hash"],
        block_number=block_number,
        gas_used=gas_used,
    )


def deploy_by_name(
    artifact_name: str,
    profile: NetworkProfile,
    artifacts_dir: Path,
    *,
    environ: Optional[Mapping[str, str]] = None,
    poll_interval: float = RECEIPT_POLL_INTERVAL_SECONDS,
) -> DeploymentResult:
    """
    Resolve a compiled contract by name and deploy it.

    Artifact lookup happens before any network call; a missing or
    malformed artifact is reported as a failed result.

    Args:
        artifact_name: Bare or fully qualified contract name
        profile: Active network profile
        artifacts_dir: Root artifacts directory
        environ: Environment the credential is resolved from
        poll_interval: Seconds between receipt polls

    Returns:
        DeploymentResult
    """
    try:
        artifact = find_artifact(artifact_name, artifacts_dir)
    except DeployerError as e:
        return DeploymentResult(contract_name=artifact_name, network=profile.name, error=e)

    return deploy(artifact, profile, environ=environ, poll_interval=poll_interval)


def build_deploy_transaction(
    artifact: ContractArtifact,
    nonce: int,
    gas: int,
    gas_price_wei: int,
    chain_id: int,
) -> Dict[str, Any]:
    """
    Build an unsigned legacy contract-creation transaction.

    Returns:
        Transaction dict accepted by Account.sign_transaction
    """
    return {
        "nonce": nonce,
        "gasPrice": gas_price_wei,
        "gas": gas,
        "value": 0,
        "data": to_hex(artifact.bytecode),
        "chainId": chain_id,
    }


def _submit_and_wait(
    artifact: ContractArtifact,
    profile: NetworkProfile,
    environ: Optional[Mapping[str, str]],
    poll_interval: float,
    submitted: Dict[str, Any],
) -> Tuple[str, int, Optional[int]]:
    # Local checks first: nothing below may touch the network if these fail
    private_key = resolve_credential(profile, environ)
    check_deployable(artifact)

    account = Account.from_key(private_key)
    sender = account.address
    url = profile.url
    data = to_hex(artifact.bytecode)

    chain_id = rpc.get_chain_id(url)
    nonce = rpc.get_transaction_count(url, sender)
    gas = rpc.estimate_gas(url, {"from": sender, "data": data})
    logger.info(
        "Deploying %s from %s on %s (chain %d, nonce %d, gas %d, gasPrice %d wei)",
        artifact.name,
        sender,
        profile.name,
        chain_id,
        nonce,
        gas,
        profile.gas_price_wei,
    )

    transaction = build_deploy_transaction(
        artifact, nonce, gas, profile.gas_price_wei, chain_id
    )
    signed = Account.sign_transaction(transaction, private_key)

    transaction_hash = rpc.send_raw_transaction(url, to_hex(signed.raw_transaction))
    submitted["transaction_hash"] = transaction_hash
    logger.info("Submitted deployment transaction %s", transaction_hash)

    receipt = wait_for_receipt(url, transaction_hash, poll_interval)

    block_number = _receipt_quantity(receipt, "blockNumber", transaction_hash)
    gas_used = _receipt_quantity(receipt, "gasUsed", transaction_hash)

    # Receipts without status predate Byzantium and carry no revert flag
    if _receipt_quantity(receipt, "status", transaction_hash) == 0:
        raise RevertError(
            f"Deployment transaction {transaction_hash} reverted in block {block_number}"
        )
    try:
        address = to_checksum_address(receipt.get("contractAddress") or "")
    except (TypeError, ValueError) as e:
        raise NetworkError(
            f"Receipt for {transaction_hash} has no valid contract address"
        ) from e
    return address, block_number, gas_used


def _receipt_quantity(
    receipt: Dict[str, Any], field: str, transaction_hash: str
) -> Optional[int]:
    value = receipt.get(field)
    if value is None:
        return None
    try:
        return int(value, 16)
    except (TypeError, ValueError) as e:
        raise NetworkError(
            f"Receipt for {transaction_hash} has a non-hex {field}: {value!r}"
        ) from e


def wait_for_receipt(
    rpc_url: str, transaction_hash: str, poll_interval: float = RECEIPT_POLL_INTERVAL_SECONDS
) -> Dict[str, Any]:
    """
    Block until a transaction is included (one confirmation).

    Polls indefinitely; the only bound is the endpoint's own behavior.

    Args:
        rpc_url: RPC endpoint URL
        transaction_hash: Hash returned by eth_sendRawTransaction
        poll_interval: Seconds between polls

    Returns:
        Transaction receipt
    """
    while True:
        receipt = rpc.get_transaction_receipt(rpc_url, transaction_hash)
        if receipt is not None and receipt.get("blockNumber") is not None:
            return receipt
        logger.debug("Waiting for %s to be included", transaction_hash)
        time.sleep(poll_interval)
