#!/usr/bin/env python3
"""
Main CLI entry point for the socialgraph service.
"""

import asyncio
import json
import sys

import click
import uvicorn

from socialgraph import __version__
from socialgraph.config import settings
from socialgraph.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="socialgraph")
def cli() -> None:
    """socialgraph CLI - serve the API, seed data and run queries."""
    pass


@cli.command()
@click.option("--host", default=settings.api_host, help="Host to bind to")
@click.option("--port", default=settings.api_port, type=int, help="Port to bind to")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, log_level: str) -> None:
    """Start the socialgraph API server."""
    configure_logging(debug=(log_level == "debug"))

    logger.info("Starting socialgraph API server", host=host, port=port, reload=reload)

    try:
        uvicorn.run(
            "socialgraph.api.app:create_app",
            factory=True,
            host=host,
            port=port,
            reload=reload,
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command()
def seed() -> None:
    """Seed the database with the sample dataset."""
    from socialgraph.database.connection import dispose_database, get_async_session
    from socialgraph.database.seed_data import count_rows, seed_database

    configure_logging()

    async def do_seed():
        try:
            async with get_async_session() as db:
                inserted = await seed_database(db)
                counts = await count_rows(db)
        finally:
            await dispose_database()
        return inserted, counts

    try:
        inserted, counts = asyncio.run(do_seed())
    except Exception as e:
        logger.error("Failed to seed database", error=str(e))
        click.echo(f"✗ Error seeding database: {e}", err=True)
        sys.exit(1)

    click.echo("✓ Database seeded successfully")
    for table, total in counts.items():
        click.echo(f"  {table}: {total} rows ({inserted.get(table, 0)} new)")


@cli.command()
@click.argument("document", required=False)
@click.option(
    "-f", "--file", "query_file", type=click.File("r"), help="Read the query document from a file"
)
@click.option("--variables", default=None, help="Variables as a JSON object")
@click.option(
    "--store",
    "store_backend",
    type=click.Choice(["sqlalchemy", "memory"]),
    default=None,
    help="Override the configured store backend",
)
def query(
    document: str | None, query_file, variables: str | None, store_backend: str | None
) -> None:
    """Execute a GraphQL query and print the result as JSON."""
    from socialgraph.database.connection import dispose_database
    from socialgraph.graphql.schema import execute_query
    from socialgraph.store.factory import create_store

    # stdout carries only the result document
    configure_logging(stream=sys.stderr)

    if query_file is not None:
        document = query_file.read()
    if not document:
        raise click.UsageError("Provide a query document or --file")

    try:
        variable_values = json.loads(variables) if variables else None
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"Invalid JSON: {e}", param_hint="--variables") from e

    config = settings.model_copy(update={"store_backend": store_backend}) if store_backend else settings
    store = create_store(config)

    async def run():
        try:
            return await execute_query(document, variable_values, store=store)
        finally:
            await store.close()
            if config.store_backend.lower() == "sqlalchemy":
                await dispose_database()

    result = asyncio.run(run())
    click.echo(json.dumps(result.to_dict(), indent=2, default=str))
    if result.errors:
        sys.exit(1)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
