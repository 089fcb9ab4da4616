"""CLI: artifacts models list|use, artifacts templates"""

import json

import click
from rich.console import Console
from rich.table import Table

from ai_artifacts.catalog import ModelCatalog, TemplateCatalog
from ai_artifacts.config import preferences_file
from ai_artifacts.preferences import PreferenceStore

console = Console()


@click.group()
def models():
    """Language model selection."""


@models.command("list")
@click.option("--json-output", "--json", is_flag=True)
def models_list(json_output):
    """List available models."""
    current = PreferenceStore(preferences_file()).language_model.model
    catalog = ModelCatalog()
    if json_output:
        click.echo(json.dumps([m.model_dump(by_alias=True) for m in catalog], indent=2))
        return
    table = Table(title="Models")
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Provider")
    for m in catalog:
        marker = " [green]*[/green]" if m.id == current else ""
        table.add_row(f"{m.id}{marker}", m.name, m.provider)
    console.print(table)


@models.command("use")
@click.argument("model_id")
@click.option("--temperature", type=float, default=None)
@click.option("--max-tokens", type=int, default=None)
@click.option("--api-key", default=None, help="Provider API key")
@click.option("--base-url", default=None, help="Provider base URL")
def models_use(model_id, temperature, max_tokens, api_key, base_url):
    """Select the model used for generation."""
    if model_id not in ModelCatalog():
        raise click.BadParameter(f"unknown model {model_id!r}", param_hint="MODEL_ID")
    store = PreferenceStore(preferences_file())
    changes = {"model": model_id, "temperature": temperature, "max_tokens": max_tokens,
               "api_key": api_key, "base_url": base_url}
    store.language_model = store.language_model.merged(**{k: v for k, v in changes.items() if v is not None})
    console.print(f"[green]Using {model_id}[/green]")


@click.command("templates")
@click.option("--json-output", "--json", is_flag=True)
def templates_cmd(json_output):
    """List templates."""
    catalog = TemplateCatalog()
    if json_output:
        click.echo(json.dumps(catalog.select(), indent=2))
        return
    table = Table(title="Templates")
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("File")
    table.add_column("Port")
    for template_id, t in catalog.items():
        table.add_row(template_id, t.name, t.file, str(t.port) if t.port else "")
    console.print(table)
