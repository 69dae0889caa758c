"""automodel CLI - Main entry point."""

import logging
from typing import Optional

import typer
from typing_extensions import Annotated
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from sqlalchemy import create_engine, inspect
from sqlalchemy.exc import SQLAlchemyError

from .builder import automodel
from .config import settings
from .connection import resolve_spec
from .database.mapper import map_tables
from .errors import AutomodelError

app = typer.Typer(
    name="automodel",
    help="Generate SQLAlchemy models by scraping a database schema",
    add_completion=False,
)

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with Rich handler."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


def _spec_or_exit(spec: Optional[str]) -> str:
    spec = spec or settings.database_url
    if not spec:
        console.print("[red]No connection spec given and AUTOMODEL_DATABASE_URL is not set[/red]")
        raise typer.Exit(1)
    return spec


@app.command()
def tables(
    spec: Optional[str] = typer.Argument(None, help="Database URL or configuration name (default: AUTOMODEL_DATABASE_URL)"),
    subschema: Optional[str] = typer.Option(None, "--subschema", "-s", help="Schema prefix for table names (e.g. dbo)"),
):
    """List tables with their primary and foreign keys."""
    spec = _spec_or_exit(spec)

    try:
        config = resolve_spec(spec)
        engine = create_engine(config["url"], **config["engine_options"])
        try:
            descriptors = map_tables(
                engine,
                subschema=subschema or config["subschema"],
                adapter=config["adapter"],
            )
        finally:
            engine.dispose()
    except (AutomodelError, SQLAlchemyError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Tables in {config['url'].render_as_string(hide_password=True)}")
    table.add_column("Table", style="cyan")
    table.add_column("Model")
    table.add_column("Primary Key")
    table.add_column("Foreign Keys")

    for descriptor in descriptors:
        foreign_keys = [
            f"{fk.column} -> {fk.to_table}.{fk.primary_key}" + (" [dim](inferred)[/dim]" if fk.synthesized else "")
            for fk in descriptor.foreign_keys
        ]
        table.add_row(
            descriptor.name,
            descriptor.model_name,
            ", ".join(descriptor.primary_key_columns) or "-",
            "\n".join(foreign_keys) or "-",
        )

    console.print(table)


@app.command()
def models(
    spec: Annotated[Optional[str], typer.Argument(
        help="Database URL or configuration name (default: AUTOMODEL_DATABASE_URL)"
    )] = None,
    namespace: Annotated[Optional[str], typer.Option(
        "--namespace", "-n",
        help="Namespace path for the generated models (e.g. Library or WeirdDB::Models)"
    )] = None,
    subschema: Annotated[Optional[str], typer.Option(
        "--subschema", "-s",
        help="Schema prefix for table names (e.g. dbo)"
    )] = None,
):
    """Generate models and show their aliases and associations."""
    spec = _spec_or_exit(spec)

    try:
        base = automodel(spec, namespace=namespace, subschema=subschema)
    except (AutomodelError, SQLAlchemyError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    try:
        table = Table(title=f"Models in {base.registry_path or base.namespace_registry.root.name}")
        table.add_column("Model", style="cyan")
        table.add_column("Table")
        table.add_column("Aliases")
        table.add_column("Associations")

        for name, model in sorted(base.models().items()):
            aliases = [
                f"{alias} -> {column.name}"
                for alias, column in model.column_aliases.items()
                if alias != column.name
            ]
            associations = [
                f"{relationship.key} -> {relationship.mapper.class_.__name__}"
                for relationship in inspect(model).relationships
            ]
            table.add_row(
                name,
                model.table_descriptor.name,
                "\n".join(aliases) or "-",
                "\n".join(associations) or "-",
            )

        console.print(table)
    finally:
        base.disconnect()


@app.command()
def config():
    """Show current configuration."""
    console.print("[bold]Current Configuration[/bold]")
    console.print(f"  Database URL: {settings.database_url or 'Not set'}")
    console.print(f"  Named configurations: {', '.join(sorted(settings.configurations)) or 'None'}")
    console.print(f"  Default Namespace: {settings.default_namespace or 'Not set'}")
    console.print(f"  Connectors Namespace: {settings.connectors_namespace}")
    console.print(f"  Log Level: {settings.log_level}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    automodel - Generate SQLAlchemy models by scraping a database schema.

    Examples:

        automodel tables sqlite:///library.db

        automodel models sqlite:///library.db --namespace Library

        automodel models warehouse --subschema dbo
    """
    setup_logging(verbose)


if __name__ == "__main__":
    app()
