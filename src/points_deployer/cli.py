"""Command-line entry point for points-deployer."""

import logging
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from .artifacts import artifact_names
from .config import describe_networks, load_config, select_profile
from .constants import DEFAULT_CONTRACT, RECEIPT_POLL_INTERVAL_SECONDS
from .deployer import deploy_by_name
from .exceptions import DeployerError
from .paths import get_dotenv_path
from .types import DeployerConfig, DeploymentResult

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbosity: int) -> None:
    """Send log records to stderr; stdout is reserved for the result line."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def report_result(result: DeploymentResult) -> int:
    """
    Write a deployment result for the operator.

    Returns:
        Process exit status (0 on success, 1 on failure)
    """
    if result.ok:
        click.echo(f"{result.contract_name} deployed to: {result.contract_address}")
        return 0

    click.echo(f"{result.error_kind}: {result.error}", err=True)
    return 1


def _fail(ctx: click.Context, error: DeployerError) -> None:
    click.echo(f"{type(error).__name__}: {error}", err=True)
    ctx.exit(1)


@click.group()
@click.version_option(package_name="points-deployer")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Project configuration (default: ./deployer.config.json).",
)
@click.option("--no-dotenv", is_flag=True, help="Do not load the .env file.")
@click.option("-v", "--verbose", count=True, help="Log progress to stderr (-vv for debug).")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], no_dotenv: bool, verbose: int) -> None:
    """Deploy compiled contracts to configured EVM networks."""
    configure_logging(verbose)

    if not no_dotenv:
        dotenv_path = get_dotenv_path(config_path)
        # Variables already in the environment win
        if load_dotenv(dotenv_path):
            logger.debug("Loaded environment from %s", dotenv_path)

    try:
        ctx.obj = load_config(config_path)
    except DeployerError as e:
        _fail(ctx, e)


@cli.command("deploy")
@click.argument("contract", default=DEFAULT_CONTRACT)
@click.option("-n", "--network", default=None, help="Network profile (default: defaultNetwork).")
@click.option(
    "--poll-interval",
    type=click.FloatRange(min=0),
    default=RECEIPT_POLL_INTERVAL_SECONDS,
    show_default=True,
    help="Seconds between receipt polls.",
)
@click.pass_context
def deploy_command(
    ctx: click.Context, contract: str, network: Optional[str], poll_interval: float
) -> None:
    """Deploy CONTRACT and print its address."""
    config: DeployerConfig = ctx.obj

    try:
        profile = select_profile(config, network)
    except DeployerError as e:
        _fail(ctx, e)
        return

    result = deploy_by_name(
        contract, profile, config.artifacts_dir, poll_interval=poll_interval
    )
    if result.transaction_hash:
        logger.info("Transaction %s", result.transaction_hash)
    ctx.exit(report_result(result))


@cli.command("networks")
@click.pass_obj
def networks_command(config: DeployerConfig) -> None:
    """List configured network profiles."""
    click.echo(f"solidity {config.solidity_version}")
    for name, info in describe_networks(config).items():
        marker = "*" if info["default"] else " "
        click.echo(
            f"{marker} {name}  {info['url']}  gasPrice={info['gas_price_wei']}  "
            f"account={info['credential']}"
        )


@cli.command("contracts")
@click.pass_obj
def contracts_command(config: DeployerConfig) -> None:
    """List compiled contracts available for deployment."""
    for name in artifact_names(config.artifacts_dir):
        click.echo(name)


def main() -> None:
    cli(prog_name="points-deploy")
