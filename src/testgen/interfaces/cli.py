"""Command-line interface for the test generation service.

Commands:
- serve: Run the HTTP API
- info: Show configuration
- templates: List the built-in test templates
- sync: Import a GitHub repository and sync its file tree (one-off)
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from testgen.config.loader import get_default_config_path, load_config
from testgen.config.schema import AppConfig
from testgen.core.errors import TestGenError
from testgen.observability.logging import configure_logging, get_logger

app = typer.Typer(
    name="testgen",
    help="Generate tests for GitHub repositories with an LLM and open pull requests",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


@app.command()
def serve(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    profile: Optional[str] = typer.Option(None, "--profile", help="Config profile"),
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (overrides config)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (overrides config)"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    from testgen.interfaces.api import create_app

    config = _load_config(config_file, profile)
    bind_host = host or config.server.host
    bind_port = port or config.server.port

    console.print(f"[green]Serving testgen on http://{bind_host}:{bind_port}/api[/green]")
    uvicorn.run(create_app(config), host=bind_host, port=bind_port, log_config=None)


@app.command()
def info(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    profile: Optional[str] = typer.Option(None, "--profile", help="Config profile"),
):
    """Show system information and configuration."""
    config = _load_config(config_file, profile)

    table = Table(title="Testgen Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Log Level", config.log_level.value)
    table.add_row("GitHub API", config.github.base_url)
    table.add_row("LLM Provider", config.llm.provider.value)
    table.add_row("LLM Model", config.llm.model_name)
    table.add_row("Code Model", config.llm.code_model_name or config.llm.model_name)
    table.add_row("LLM API Key", "set" if config.llm.api_key else "[red]missing[/red]")
    table.add_row("Store", config.storage.store_type.value)
    table.add_row("Max File Size", f"{config.sync.max_file_bytes} bytes")
    table.add_row("Skipped Directories", ", ".join(config.sync.skip_dirs) or "-")
    table.add_row("Default Framework", config.generation.default_framework)
    table.add_row("Server", f"{config.server.host}:{config.server.port}")

    console.print(table)


@app.command()
def templates(
    framework: Optional[str] = typer.Option(None, "--framework", "-f", help="Filter by framework"),
    category: Optional[str] = typer.Option(None, "--category", help="Filter by category"),
):
    """List the built-in test templates."""
    from testgen.core.frameworks import convention_for
    from testgen.service.templates import DEFAULT_TEMPLATES

    rows = [
        t
        for t in DEFAULT_TEMPLATES
        if (not framework or t["framework"] == framework) and (not category or t["category"] == category)
    ]
    if not rows:
        console.print("[yellow]No templates found[/yellow]")
        return

    table = Table(title="Test Templates")
    table.add_column("Framework", style="cyan")
    table.add_column("Category", style="yellow")
    table.add_column("Test Directory", style="dim")
    table.add_column("Description", style="green")
    for t in rows:
        table.add_row(t["framework"], t["category"], convention_for(t["framework"]).test_dir, t["description"])

    console.print(table)


@app.command()
def sync(
    full_name: str = typer.Argument(..., help="Repository full name (owner/name)"),
    token: str = typer.Option(..., "--token", "-t", envvar="GITHUB_TOKEN", help="GitHub access token"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    profile: Optional[str] = typer.Option(None, "--profile", help="Config profile"),
):
    """Import a repository and list the files a sync would store."""
    asyncio.run(_sync_async(full_name, token, config_file, profile))


async def _sync_async(full_name: str, token: str, config_file: Optional[Path], profile: Optional[str] = None):
    """Async implementation of sync command."""
    from testgen.clients.github import GitHubClient
    from testgen.service.sync import SyncEngine
    from testgen.storage import create_store

    config = _load_config(config_file, profile)
    store = create_store(config.storage)
    await store.initialize()
    github = GitHubClient(config.github)
    engine = SyncEngine(store, github, config.sync)

    try:
        await engine.import_repositories(token)
        if await store.get_repository(full_name) is None:
            console.print(f"[red]Repository not visible to this token: {full_name}[/red]")
            raise typer.Exit(1)

        result = await engine.sync_files(full_name)

        table = Table(title=f"Synced files: {full_name}")
        table.add_column("Path", style="cyan")
        table.add_column("Language", style="green")
        table.add_column("Size", style="yellow")
        for file in result.files:
            table.add_row(file.path, file.language or "-", file.size or "-")
        console.print(table)

        console.print(f"[green]✓[/green] {result.count} files")
        for path in result.failed_paths:
            console.print(f"[yellow]Could not list directory: {path or '/'}[/yellow]")

    except TestGenError as e:
        console.print(f"[red]Sync failed: {e.message}[/red]")
        raise typer.Exit(1)
    finally:
        await github.close()
        await store.close()


def _load_config(config_file: Optional[Path], profile: Optional[str] = None) -> AppConfig:
    """Load configuration and setup logging."""
    if config_file is None:
        config_file = get_default_config_path()

    config = load_config(config_file, profile=profile, env_file=Path.cwd() / ".env")
    configure_logging(level=config.log_level, json_logs=config.json_logs)

    return config


if __name__ == "__main__":
    app()
