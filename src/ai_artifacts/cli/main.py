"""
ai-artifacts CLI: `artifacts` command.

Commands:
  artifacts auth login          Store user id and API key
  artifacts generate <prompt>   One-shot generate and execute
  artifacts chat                Interactive REPL keeping history
  artifacts models <cmd>        List or pick the language model
  artifacts templates           List templates
  artifacts repo                Open the project page
"""

import asyncio
import logging
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from ai_artifacts.client import AsyncArtifacts
from ai_artifacts.config import load_config, resolve_base_url

console = Console()
REPO_URL = "https://github.com/e2b-dev/ai-artifacts"


def _get_client(base_url: Optional[str] = None, stream_format: str = "text") -> AsyncArtifacts:
    return AsyncArtifacts(base_url=resolve_base_url(base_url, load_config()), stream_format=stream_format)


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log to stderr")
def main(verbose: bool):
    """ai-artifacts CLI: describe an app, get it generated and running."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@main.command("repo")
def repo_cmd():
    """Open the project page in a browser."""
    client = _get_client()
    url = client.orchestrator.open_external(REPO_URL)
    click.launch(url)
    _run(client.http.close())


# Register subcommands from separate modules
from ai_artifacts.cli.auth import auth
from ai_artifacts.cli.catalog import models, templates_cmd
from ai_artifacts.cli.generate import chat_cmd, generate_cmd

main.add_command(auth)
main.add_command(generate_cmd)
main.add_command(chat_cmd)
main.add_command(models)
main.add_command(templates_cmd)


if __name__ == "__main__":
    main()
