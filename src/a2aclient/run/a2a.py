"""Command line client for a remote A2A agent.

Commands:
1. card   - fetch the agent card
2. send   - send a message and wait for the single result
3. stream - send a message and follow the event stream until it concludes
4. run    - all of the above, in that order
"""

import logging
import os
from pathlib import Path

import typer
import yaml

from a2aclient import package_dir
from a2aclient.a2a.service import A2AClientConfig, AgentClientService
from a2aclient.exceptions import TransportError

app = typer.Typer()
logger = logging.getLogger("a2a-client")

DEFAULT_TEXT = "tell me a story about cats"


def load_config(config_file: Path, url: str | None = None, card_path: str | None = None) -> A2AClientConfig:
    """Read the ``client`` section of a YAML config file, applying overrides."""
    config_data = yaml.safe_load(config_file.read_text()) or {}
    client_config = config_data.get("client", {})
    if url:
        client_config["url"] = url
    if card_path:
        client_config["card_path"] = card_path
    return A2AClientConfig(**client_config)


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Path = typer.Option(
        package_dir / "config" / "default.yaml",
        "-c",
        "--config",
        help="Client configuration file",
    ),
    url: str = typer.Option(
        os.getenv("A2A_AGENT_URL"),
        "-u",
        "--url",
        help="JSON-RPC endpoint of the agent (defaults to A2A_AGENT_URL env var)",
    ),
    card_path: str = typer.Option(
        os.getenv("A2A_AGENT_CARD_PATH"),
        "--card-path",
        help="Agent card path (defaults to A2A_AGENT_CARD_PATH env var)",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
):
    """Talk to a remote agent over the A2A protocol."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if not config_file.exists():
        logger.error(f"Config file not found: {config_file}")
        raise typer.Exit(1)
    ctx.obj = load_config(config_file, url=url, card_path=card_path)


@app.command()
def card(ctx: typer.Context):
    """Fetch and print the agent card."""
    with AgentClientService(ctx.obj) as service:
        try:
            agent_card = service.fetch_agent_card()
        except TransportError as e:
            logger.error(f"Could not fetch agent card: {e}")
            raise typer.Exit(1)
    typer.echo(agent_card.model_dump_json(indent=2))


@app.command()
def send(ctx: typer.Context, text: str = typer.Argument(DEFAULT_TEXT, help="Message text")):
    """Send a message and wait for the result."""
    with AgentClientService(ctx.obj) as service:
        try:
            response = service.send_message(text)
        except TransportError as e:
            logger.error(f"Could not send message: {e}")
            raise typer.Exit(1)
    if response.error is not None:
        logger.error(f"Agent returned error {response.error.code}: {response.error.message}")
        raise typer.Exit(1)


@app.command()
def stream(
    ctx: typer.Context,
    text: str = typer.Argument(DEFAULT_TEXT, help="Message text"),
    timeout: float = typer.Option(None, "-t", "--timeout", help="Seconds to wait for the session to conclude"),
):
    """Send a message and follow the event stream until the session concludes."""
    with AgentClientService(ctx.obj) as service:
        completed = service.send_streaming_message(text, timeout=timeout)
    if not completed:
        raise typer.Exit(1)


@app.command()
def run(ctx: typer.Context, text: str = typer.Argument(DEFAULT_TEXT, help="Message text")):
    """Fetch the agent card, then send the message synchronously and streaming."""
    with AgentClientService(ctx.obj) as service:
        try:
            service.fetch_agent_card()
            service.send_message(text)
            completed = service.send_streaming_message(text)
        except TransportError as e:
            logger.error(f"An error occurred: {e}")
            raise typer.Exit(1)
    if not completed:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
