"""Configuration constants for points-deployer."""

DEFAULT_CONTRACT = "PointsOption"

CONFIG_FILENAME = "deployer.config.json"
DOTENV_FILENAME = ".env"

# Credential references name an environment variable, e.g. "env:PRIVATE_KEY"
CREDENTIAL_ENV_PREFIX = "env:"

# Built-in project configuration, used when no config file is present
DEFAULT_CONFIG = {
    "solidity": "0.8.20",
    "paths": {
        "sources": "./contracts",
        "artifacts": "./artifacts",
    },
    "defaultNetwork": "blast-local",
    "networks": {
        # Blast Sepolia testnet
        "blast-sepolia": {
            "url": "https://sepolia.blast.io",
            "accounts": ["env:PRIVATE_KEY"],
            "gasPrice": 1000000000,
        },
        # Local development node
        "blast-local": {
            "url": "http://localhost:8545",
            "accounts": ["env:PRIVATE_KEY"],
            "gasPrice": 1000000000,
        },
    },
}

# Keys accepted in each network profile; all of them are required
NETWORK_PROFILE_KEYS = ("url", "accounts", "gasPrice")

# hardhat artifact format marker
ARTIFACT_FORMAT = "hh-sol-artifact-1"

RPC_TIMEOUT_SECONDS = 30
RECEIPT_POLL_INTERVAL_SECONDS = 1.0
