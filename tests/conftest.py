"""Shared pytest fixtures for points-deployer tests."""

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest
import responses
from eth_utils import keccak, to_checksum_address, to_hex

from points_deployer.artifacts import parse_artifact
from points_deployer.types import ContractArtifact, NetworkProfile

# First default hardhat/anvil development account; never holds real funds
DEV_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
DEV_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

LOCAL_RPC_URL = "http://localhost:8545"


class FakeNode:
    """Minimal JSON-RPC node that mines every submitted transaction."""

    def __init__(self, chain_id: int = 31337):
        self.chain_id = chain_id
        self.nonce = 0
        self.gas_estimate = 250000
        self.methods: List[str] = []
        self.raw_transactions: List[str] = []
        self.errors: Dict[str, Dict[str, Any]] = {}
        self.revert = False
        # Number of receipt polls answered with null before inclusion
        self.pending_polls = 0
        # Fields replaced in every receipt, for nodes returning odd values
        self.receipt_overrides: Dict[str, Any] = {}
        self._receipts: Dict[str, Dict[str, Any]] = {}

    def handle(self, request):
        body = json.loads(request.body)
        method = body["method"]
        self.methods.append(method)

        if method in self.errors:
            payload = {"jsonrpc": "2.0", "id": body["id"], "error": self.errors[method]}
        else:
            result = getattr(self, method)(*body["params"])
            payload = {"jsonrpc": "2.0", "id": body["id"], "result": result}
        return (200, {}, json.dumps(payload))

    def eth_chainId(self):
        return hex(self.chain_id)

    def eth_getTransactionCount(self, address, block):
        return hex(self.nonce)

    def eth_estimateGas(self, transaction):
        return hex(self.gas_estimate)

    def eth_sendRawTransaction(self, raw):
        self.raw_transactions.append(raw)
        tx_hash = to_hex(keccak(hexstr=raw))
        contract_address = to_checksum_address(keccak(text=f"contract-{self.nonce}")[-20:])
        self._receipts[tx_hash] = {
            "transactionHash": tx_hash,
            "blockNumber": hex(100 + self.nonce),
            "gasUsed": hex(self.gas_estimate - 1000),
            "status": "0x0" if self.revert else "0x1",
            "contractAddress": contract_address.lower(),
        }
        self._receipts[tx_hash].update(self.receipt_overrides)
        self.nonce += 1
        return tx_hash

    def eth_getTransactionReceipt(self, tx_hash):
        if self.pending_polls > 0:
            self.pending_polls -= 1
            return None
        return self._receipts.get(tx_hash)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def artifacts_dir(fixtures_dir: Path) -> Path:
    """Return the sample hardhat artifacts directory."""
    return fixtures_dir / "artifacts"


@pytest.fixture
def points_option_artifact(artifacts_dir: Path) -> ContractArtifact:
    """Load the sample PointsOption artifact."""
    return parse_artifact(artifacts_dir / "contracts" / "PointsOption.sol" / "PointsOption.json")


@pytest.fixture
def local_profile() -> NetworkProfile:
    """Profile for a local development node."""
    return NetworkProfile(
        name="blast-local",
        url=LOCAL_RPC_URL,
        credential="env:PRIVATE_KEY",
        gas_price_wei=1000000000,
    )


@pytest.fixture
def dev_address() -> str:
    """Address derived from the development key."""
    return DEV_ADDRESS


@pytest.fixture
def dev_environ() -> Dict[str, str]:
    """Environment holding a valid signing key."""
    return {"PRIVATE_KEY": DEV_PRIVATE_KEY}


@pytest.fixture
def mocked_rpc():
    """Activate HTTP mocking; unregistered URLs raise ConnectionError."""
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def fake_node(mocked_rpc) -> FakeNode:
    """Serve a FakeNode at the local RPC URL."""
    node = FakeNode()
    mocked_rpc.add_callback(
        responses.POST,
        LOCAL_RPC_URL,
        callback=node.handle,
        content_type="application/json",
    )
    return node


@pytest.fixture
def config_file(tmp_path: Path, artifacts_dir: Path) -> Path:
    """Write a project configuration pointing at the sample artifacts."""
    config = {
        "solidity": "0.8.20",
        "paths": {"sources": "./contracts", "artifacts": str(artifacts_dir)},
        "defaultNetwork": "blast-local",
        "networks": {
            "blast-sepolia": {
                "url": "https://sepolia.blast.io",
                "accounts": ["env:PRIVATE_KEY"],
                "gasPrice": 1000000000,
            },
            "blast-local": {
                "url": LOCAL_RPC_URL,
                "accounts": ["env:PRIVATE_KEY"],
                "gasPrice": 1000000000,
            },
        },
    }
    path = tmp_path / "deployer.config.json"
    with open(path, "w") as f:
        json.dump(config, f, indent=2)
    return path
