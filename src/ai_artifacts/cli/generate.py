"""CLI: artifacts generate, artifacts chat"""

from typing import Optional

import click
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.syntax import Syntax
from rich.text import Text

from ai_artifacts.errors import AuthDeferred
from ai_artifacts.ui_state import State, UIState

console = Console()


def _get_client(base_url: Optional[str], stream_format: str):
    from ai_artifacts.cli.main import _get_client
    return _get_client(base_url, stream_format)


def _run(coro):
    from ai_artifacts.cli.main import _run
    return _run(coro)


def _file_path(view: UIState) -> str:
    path = getattr(view.artifact, "file_path", None)
    return path if isinstance(path, str) and path else "artifact.txt"


def render(view: UIState):
    """Live panel for the assistant turn being generated."""
    message = view.messages[-1] if view.messages else None
    if message is None or message.role != "assistant":
        return Text(view.state.value, style="dim")
    title = (message.meta.title if message.meta else None) or "Artifact"
    parts = []
    if message.commentary:
        parts.append(Text(message.commentary, style="italic"))
    if message.content:
        parts.append(Syntax(message.content, Syntax.guess_lexer(_file_path(view), code=message.content),
                            line_numbers=True))
    status = f"{view.state.value} · tab: {view.active_tab.value}"
    return Panel(Group(*parts), title=title, subtitle=status)


def print_outcome(view: UIState) -> None:
    if view.state is State.FAILED:
        console.print(f"[red]Failed ({view.error_code}):[/red] {view.displayed_error}")
        return
    if view.state is State.IDLE:
        console.print("[yellow]Stopped.[/yellow]")
        return
    result = view.result
    if result is None:
        return
    if result.url:
        console.print(f"[green]Running at[/green] {result.url}")
    for label, value in (("stdout", result.stdout), ("stderr", result.stderr)):
        if value:
            text = "".join(value) if isinstance(value, list) else str(value)
            console.print(Panel(text.rstrip(), title=label))
    if result.runtime_error:
        console.print(f"[red]Runtime error:[/red] {result.runtime_error}")


async def _submit_live(client, prompt: str, template: Optional[str] = None) -> UIState:
    with Live(render(client.view), console=console, refresh_per_second=12) as live:
        remove = client.orchestrator.add_listener(lambda view: live.update(render(view)))
        try:
            return await client.generate(prompt, template=template)
        finally:
            remove()


@click.command("generate")
@click.argument("prompt")
@click.option("-t", "--template", default="auto", help="Template id, or auto")
@click.option("-m", "--model", default=None, help="Model id for this and later runs")
@click.option("--base-url", default=None)
@click.option("--ndjson", "stream_format", flag_value="ndjson", default="text", help="Server streams NDJSON snapshots")
@click.option("--json-output", "--json", is_flag=True)
def generate_cmd(prompt: str, template: str, model: Optional[str], base_url: Optional[str],
                 stream_format: str, json_output: bool):
    """Generate an artifact from PROMPT and execute it."""

    async def _generate():
        client = _get_client(base_url, stream_format)
        if model:
            client.orchestrator.update_language_model(model=model)
        try:
            if json_output:
                view = await client.generate(prompt, template=template)
            else:
                view = await _submit_live(client, prompt, template)
        except AuthDeferred:
            console.print("[red]Not signed in. Run `artifacts auth login` first.[/red]")
            raise SystemExit(1)
        finally:
            await client.close()

        if json_output:
            click.echo(view.model_dump_json(indent=2, by_alias=True, exclude_none=True, exclude={"messages"}))
        else:
            print_outcome(view)
        if view.state is State.FAILED:
            raise SystemExit(1)

    _run(_generate())


def _read_message(client) -> str:
    """Blocking prompt. Only called once generate() has returned, so nothing is in flight."""
    pending = client.orchestrator.chat_input
    return click.prompt("You", default=pending or None, prompt_suffix=": ")


@click.command("chat")
@click.option("-t", "--template", default="auto", help="Template id, or auto")
@click.option("--base-url", default=None)
def chat_cmd(template: str, base_url: Optional[str]):
    """Interactive session; each message refines the previous artifact."""

    async def _chat():
        client = _get_client(base_url, "text")
        client.orchestrator.select_template(template)
        console.print("[cyan]Describe what to build. /template <id> switches template, /quit exits.[/cyan]\n")
        try:
            while True:
                msg = _read_message(client)
                if msg.lower() in ("/quit", "/exit"):
                    break
                if msg.startswith("/template "):
                    try:
                        client.orchestrator.select_template(msg.split(None, 1)[1].strip())
                    except KeyError as e:
                        console.print(f"[red]{e.args[0]}[/red]")
                    continue
                try:
                    view = await _submit_live(client, msg)
                except AuthDeferred:
                    console.print("[yellow]Sign in with `artifacts auth login`, then resend.[/yellow]")
                    continue
                print_outcome(view)
        except (KeyboardInterrupt, EOFError, click.Abort):
            pass
        finally:
            await client.close()

    _run(_chat())
