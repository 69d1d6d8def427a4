"""CLI commands for KITT."""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from kitt import __logo__, __version__

app = typer.Typer(
    name="kitt",
    help=f"{__logo__} KITT - knowledge-grounded LINE assistant",
    no_args_is_help=True,
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"{__logo__} kitt v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(None, "--version", "-v", callback=_version_callback, is_eager=True),
):
    """KITT - knowledge-grounded LINE assistant."""


# ============================================================================
# Knowledge base
# ============================================================================


@app.command()
def kb():
    """Load the knowledge base once and show what was found."""
    from kitt.knowledge.store import KnowledgeStore
    from kitt.settings import get_settings

    settings = get_settings()
    store = KnowledgeStore(settings.kb_path, suffix=settings.kb_suffix)
    snapshot = store.load()

    table = Table(title=f"Knowledge base: {store.root}")
    table.add_column("Section", style="cyan")
    table.add_column("Chars", justify="right")
    for name in store.section_names:
        size = len(snapshot[name])
        table.add_row(name, str(size) if size else "[dim]missing/empty[/dim]")

    console.print(table)
    console.print(f"Loaded at {snapshot.last_updated.isoformat()}")


# ============================================================================
# Ask (one-shot pipeline run)
# ============================================================================


@app.command()
def ask(
    message: str = typer.Option(..., "--message", "-m", help="Message to send through the pipeline"),
    source_id: str = typer.Option("cli:default", "--source", "-s", help="Source identifier for logs"),
    logs: bool = typer.Option(False, "--logs/--no-logs", help="Show KITT runtime logs"),
):
    """Run a single message through detection, intent and response."""
    from loguru import logger

    from kitt.api.services import build_pipeline
    from kitt.knowledge.store import KnowledgeStore
    from kitt.providers.ollama import OllamaClient
    from kitt.settings import get_settings

    if logs:
        logger.enable("kitt")
    else:
        logger.disable("kitt")

    settings = get_settings()
    store = KnowledgeStore(settings.kb_path, suffix=settings.kb_suffix)
    store.load()

    async def run() -> str:
        llm = OllamaClient(settings=settings)
        try:
            return await build_pipeline(store, llm).handle_message(message, source_id)
        finally:
            await llm.aclose()

    console.print(asyncio.run(run()))


# ============================================================================
# Serve (FastAPI HTTP)
# ============================================================================


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind host (default: KITT_HOST)"),
    port: int = typer.Option(None, "--port", "-p", help="Bind port (default: KITT_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
):
    """Start the LINE webhook server (FastAPI + Uvicorn)."""
    import uvicorn

    from kitt.settings import get_settings

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port

    console.print(f"{__logo__} KITT LINE bot starting on {host}:{port}")
    console.print(f"  Webhook: http://localhost:{port}/webhook")
    console.print(f"  Health:  http://localhost:{port}/health")
    uvicorn.run(
        "kitt.api.app:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


if __name__ == "__main__":
    app()
