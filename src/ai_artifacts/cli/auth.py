"""CLI: artifacts auth login|status|logout"""

from typing import Optional

import click
from rich.console import Console

from ai_artifacts.auth import StoredIdentity
from ai_artifacts.config import config_file, load_config, resolve_base_url, save_config

console = Console()


@click.group()
def auth():
    """Authentication commands."""


@auth.command("login")
@click.option("--user-id", default=None, help="User id issued by the identity provider")
@click.option("--api-key", default=None, help="Sandbox API key forwarded on execution")
@click.option("--email", default=None)
@click.option("--base-url", default=None, help="ai-artifacts app base URL")
def auth_login(user_id: Optional[str], api_key: Optional[str], email: Optional[str], base_url: Optional[str]):
    """Store credentials for later submissions."""
    user_id = user_id or click.prompt("User id")
    if api_key is None:
        api_key = click.prompt("API key", default="", hide_input=True, show_default=False) or None

    user = StoredIdentity().sign_in(user_id, api_key=api_key, email=email)
    if base_url:
        save_config({**load_config(), "base_url": base_url})
    console.print(f"[green]Signed in as {user.email or user.id}[/green]")
    console.print(f"[dim]Saved to {config_file()} (server: {resolve_base_url(base_url)})[/dim]")


@auth.command("status")
def auth_status():
    """Show current auth status."""
    identity = StoredIdentity()
    user = identity.current_user()
    if user:
        key = "set" if identity.api_key() else "not set"
        console.print(f"[green]Signed in[/green] as {user.email or 'unknown'} (ID: {user.id}, API key {key})")
    else:
        console.print("[yellow]Not signed in. Run `artifacts auth login`.[/yellow]")


@auth.command("logout")
def auth_logout():
    """Clear saved credentials."""
    StoredIdentity().sign_out()
    console.print("[green]Signed out.[/green]")
