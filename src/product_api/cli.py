"""Command-line interface for running and maintaining the Product API."""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from src.product_api.runtime.context import get_config

console = Console()

app = typer.Typer(
    name="product-api",
    help="Product API - serve the application and manage its database",
    rich_markup_mode="rich",
)


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Interface to bind (defaults to config)"),
    port: int | None = typer.Option(None, help="Port to bind (defaults to config)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    config = get_config()
    host = host or config.app.host
    port = port or config.app.port
    console.print(
        Panel.fit(
            f"[green]Serving Product API[/green] on http://{host}:{port}\n"
            f"Environment: [cyan]{config.app.environment}[/cyan]\n"
            f"Docs: http://{host}:{port}/docs",
            title="product-api",
        )
    )
    uvicorn.run(
        "src.product_api.api.http.app:app",
        host=host,
        port=port,
        reload=reload,
        access_log=False,
    )


@app.command("init-db")
def init_db() -> None:
    """Create the products table in the configured database."""
    from sqlalchemy.exc import SQLAlchemyError

    from src.product_api.runtime.init_db import init_db as create_tables

    try:
        create_tables()
    except SQLAlchemyError as e:
        console.print(f"[red]Database initialization failed: {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print("[green]✓[/green] Database initialized")


@app.command()
def openapi(
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write the document here instead of stdout"
    ),
) -> None:
    """Export the generated OpenAPI document as JSON."""
    from src.product_api.api.http.app import create_app

    document = json.dumps(create_app().openapi(), indent=2)
    if output is None:
        typer.echo(document)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(document + "\n")
    console.print(f"[green]✓[/green] OpenAPI document written to {output}")


if __name__ == "__main__":
    app()
