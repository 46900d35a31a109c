"""JSON-RPC transport for points-deployer."""

import itertools
import logging
from typing import Any, Dict, List, Optional

import requests

from .constants import RPC_TIMEOUT_SECONDS
from .exceptions import NetworkError, RevertError

logger = logging.getLogger(__name__)

_request_ids = itertools.count(1)


def rpc_call(
    rpc_url: str,
    method: str,
    params: Optional[List[Any]] = None,
    timeout: float = RPC_TIMEOUT_SECONDS,
) -> Any:
    """
    Make a single JSON-RPC request.

    Args:
        rpc_url: RPC endpoint URL
        method: JSON-RPC method, e.g. "eth_chainId"
        params: Positional parameters
        timeout: Per-request transport timeout in seconds

    Returns:
        The "result" member of the response

    Raises:
        RevertError: If the node reports an execution revert
        NetworkError: On transport failure, HTTP error, or any other RPC error
    """
    payload = {
        "jsonrpc": "2.0",
        "method": method,
        "params": params or [],
        "id": next(_request_ids),
    }
    logger.debug("RPC %s -> %s", method, rpc_url)

    try:
        response = requests.post(rpc_url, json=payload, timeout=timeout)
    except requests.RequestException as e:
        raise NetworkError(f"Network error during {method} call to {rpc_url}: {e}") from e

    # Check for HTTP errors
    if response.status_code != 200:
        raise NetworkError(
            f"{method} request to {rpc_url} failed with status {response.status_code}"
        )

    try:
        result = response.json()
    except ValueError as e:
        raise NetworkError(f"{method} response from {rpc_url} is not valid JSON") from e

    # Check for RPC errors
    if "error" in result:
        raise _error_from_rpc(method, result["error"])

    if "result" not in result:
        raise NetworkError(f"{method} response from {rpc_url} has no result")

    return result["result"]


def _error_from_rpc(method: str, error: Any) -> Exception:
    if isinstance(error, dict):
        message = str(error.get("message", error))
        data = error.get("data")
    else:
        message = str(error)
        data = None

    if "revert" in message.lower():
        detail = f"{method} reverted: {message}"
        if data:
            detail += f" (data: {data})"
        return RevertError(detail)

    return NetworkError(f"RPC error from {method}: {message}")


def _to_int(value: str, method: str) -> int:
    try:
        return int(value, 16)
    except (TypeError, ValueError) as e:
        raise NetworkError(f"{method} returned a non-hex quantity: {value!r}") from e


def get_chain_id(rpc_url: str) -> int:
    """Get the chain ID of the endpoint."""
    return _to_int(rpc_call(rpc_url, "eth_chainId"), "eth_chainId")


def get_transaction_count(rpc_url: str, address: str) -> int:
    """Get the next nonce for an address, including pending transactions."""
    return _to_int(
        rpc_call(rpc_url, "eth_getTransactionCount", [address, "pending"]),
        "eth_getTransactionCount",
    )


def estimate_gas(rpc_url: str, transaction: Dict[str, Any]) -> int:
    """
    Estimate gas for a transaction.

    Args:
        rpc_url: RPC endpoint URL
        transaction: Call object (from, data, gasPrice, ...) with hex values

    Returns:
        Estimated gas

    Raises:
        RevertError: If the node reports the execution would revert
    """
    return _to_int(rpc_call(rpc_url, "eth_estimateGas", [transaction]), "eth_estimateGas")


def send_raw_transaction(rpc_url: str, raw_transaction: str) -> str:
    """
    Submit a signed transaction.

    Returns:
        Transaction hash
    """
    return rpc_call(rpc_url, "eth_sendRawTransaction", [raw_transaction])


def get_transaction_receipt(rpc_url: str, transaction_hash: str) -> Optional[Dict[str, Any]]:
    """
    Get the receipt of a transaction.

    Returns:
        Receipt dict, or None while the transaction is not yet included
    """
    return rpc_call(rpc_url, "eth_getTransactionReceipt", [transaction_hash])
