"""Command-line interface for Poolflow."""

import asyncio
import json
import logging
from pathlib import Path

import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from poolflow.clients.contract_client import RelayContractClient, build_explorer_url
from poolflow.clients.wallet_client import PromptWalletGateway, is_valid_public_key
from poolflow.config import Settings, get_settings
from poolflow.forms import PoolForm
from poolflow.services.submission import SubmissionController, SubmissionState
from poolflow.services.wallet import WalletGateway, WalletSession

VERSION = "0.1.0"

app = typer.Typer(help="Create donation pools on Stellar")
console = Console()


def get_config_path() -> Path:
    """Get the configuration file path."""
    return Path.home() / ".poolflow" / "config.json"


def load_config() -> dict[str, str]:
    """Load configuration from file, or an empty config if there is none."""
    config_path = get_config_path()
    if not config_path.exists():
        return {}

    try:
        with open(config_path) as f:
            config = json.load(f)
    except Exception as e:
        rprint(f"[red]Error loading config:[/red] {e}")
        raise typer.Exit(1) from e

    if not isinstance(config, dict):
        rprint(f"[red]Error loading config:[/red] {config_path} must hold a JSON object")
        raise typer.Exit(1)
    return config


def save_config(wallet_public_key: str, relay_url: str) -> None:
    """Save configuration to file."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    config = {
        "wallet_public_key": wallet_public_key,
        "relay_url": relay_url,
    }

    with open(config_path, "w") as f:
        json.dump(config, f, indent=2)


def configure_logging(settings: Settings, verbose: bool = False) -> None:
    """Set up root logging for a CLI run."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def prompt_public_key() -> str:
    """Ask the user for their wallet's public key."""
    return typer.prompt(
        "Wallet public key (leave empty to cancel)", default="", show_default=False
    )


@app.command("configure")
def configure() -> None:
    """Configure wallet public key and relay URL."""
    rprint("[cyan]Poolflow Configuration[/cyan]")
    rprint()

    settings = get_settings()
    wallet_public_key = typer.prompt("Wallet public key")
    if not is_valid_public_key(wallet_public_key.strip()):
        rprint("[red]That is not a Stellar public key.[/red]")
        raise typer.Exit(1)
    relay_url = typer.prompt("Relay URL", default=settings.relay_url)

    save_config(wallet_public_key.strip(), relay_url)
    rprint()
    rprint("[green]Configuration saved![/green]")


@app.command("create")
def create(
    name: str = typer.Option(..., "--name", "-n", help="Pool name"),
    description: str = typer.Option(..., "--description", "-d", help="What the pool funds"),
    external_url: str = typer.Option(..., "--external-url", "-u", help="Project website"),
    image_hash: str = typer.Option(..., "--image-hash", "-i", help="IPFS hash of the cover image"),
    target_amount: str = typer.Option(
        ..., "--target-amount", "-t", help="Funding goal in XLM (up to 7 decimals)"
    ),
    duration_days: str = typer.Option(..., "--duration-days", help="Days until the deadline"),
    yes: bool = typer.Option(
        False, "--yes", "-y", help="Never prompt; fail instead of connecting or retrying"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Create a donation pool from the given details."""
    settings = get_settings()
    configure_logging(settings, verbose)
    config = load_config()

    form = PoolForm(
        name=name,
        description=description,
        external_url=external_url,
        image_hash=image_hash,
        target_amount=target_amount,
        duration_days=duration_days,
    )
    wallet = PromptWalletGateway(
        config.get("wallet_public_key") or settings.wallet_public_key,
        prompt=prompt_public_key,
    )

    exit_code = asyncio.run(
        run_create(form, wallet, settings, relay_url=config.get("relay_url"), interactive=not yes)
    )
    raise typer.Exit(exit_code)


async def run_create(
    form: PoolForm,
    wallet_gateway: WalletGateway,
    settings: Settings,
    relay_url: str | None = None,
    interactive: bool = True,
) -> int:
    """
    Drive one pool creation from wallet check to outcome.

    Returns:
        Process exit code (0 on success)
    """
    session = WalletSession(wallet_gateway)
    with console.status("[cyan]Checking wallet...[/cyan]"):
        await session.initialize()

    if not session.is_connected() and interactive:
        if typer.confirm("No wallet connected. Connect one now?", default=True):
            if await session.connect():
                rprint(f"[green]✓ Wallet connected:[/green] {session.identity}")

    async with RelayContractClient(base_url=relay_url) as contract:
        controller = SubmissionController(
            session, contract, form=form, timeout=settings.submit_timeout_seconds
        )

        while True:
            with console.status("[cyan]Creating pool...[/cyan]"):
                state = await controller.submit()

            if state is SubmissionState.SUCCESS:
                print_success(controller)
                return 0

            if state is SubmissionState.IDLE:
                rprint(f"[red]{controller.inline_message}[/red]")
                return 1

            error = controller.error
            rprint()
            rprint("[red]✗ Pool creation failed[/red]")
            if error is not None:
                console.print(error.message, markup=False)
            if not interactive or not typer.confirm("Try again?", default=False):
                return 1
            controller.try_again()


def print_success(controller: SubmissionController) -> None:
    """Render the created pool's details."""
    result = controller.result
    rprint()
    rprint("[green]✓ Pool created successfully![/green]")
    rprint()

    table = Table(title="New Pool")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green", no_wrap=False)
    if result is not None:
        if result.pool_id is not None:
            table.add_row("Pool ID", str(result.pool_id))
        table.add_row("Transaction", result.tx_hash)
        table.add_row("Explorer", controller.explorer_url or "N/A")
    console.print(table)


@app.command("explorer")
def explorer(tx_hash: str = typer.Argument(..., help="Transaction hash")) -> None:
    """Print the block explorer link for a transaction."""
    settings = get_settings()
    rprint(build_explorer_url(tx_hash, settings.explorer_base_url, settings.stellar_network))


@app.callback()
def main() -> None:
    """Poolflow - Create donation pools on the Stellar blockchain.

    Run 'poolflow create --help' for options.
    """
    pass


@app.command("version")
def version() -> None:
    """Show version information."""
    rprint(f"Poolflow CLI version {VERSION}")


if __name__ == "__main__":
    app()
