# ==============================================
# CLI: Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Provides command-line interface to run discovery.
#   This is how users interact with the system.
#
# COMMANDS:
# ---------
# 1. List databases:
#    dockind databases
#
# 2. Detect document kinds for every collection of a database:
#    dockind kinds --database shop --exclude region --save
#
# 3. Distinct kind values per collection:
#    dockind collections --database shop --kind orders=type
#
# 4. Profile one collection:
#    dockind infer --database shop --collection orders --sample-size 30
#
# All commands print JSON (Extended JSON for BSON values) on stdout.
# Connection settings come from the environment / .env (see config.py).
#
# ==============================================

from typing import Dict, Tuple

import click
from bson import json_util

from dockind import __version__
from dockind.config import get_config
from dockind.errors import ReverseEngineeringError
from dockind.logging_config import setup_logging
from dockind.persistence import MetadataStore
from dockind.reverse_engineer import ReverseEngineer
from dockind.storage import MongoClient


def _echo_json(payload) -> None:
    click.echo(json_util.dumps(payload, indent=2))


def _parse_kind_options(values: Tuple[str, ...]) -> Dict[str, str]:
    kinds = {}
    for item in values:
        collection, sep, kind_field = item.partition("=")
        if not sep or not collection or not kind_field:
            raise click.BadParameter(f"expected COLLECTION=FIELD, got {item!r}", param_hint="--kind")
        kinds[collection] = kind_field
    return kinds


def _open_engineer() -> Tuple[MongoClient, ReverseEngineer]:
    config = get_config()
    client = MongoClient.from_config(config.mongo)
    try:
        client.connect()
    except ReverseEngineeringError as e:
        raise click.ClickException(str(e)) from e
    return client, ReverseEngineer(client, config)


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default=None, help="Logging level (defaults to LOG_LEVEL, else WARNING).")
@click.option("--log-file", default=None, help="Also write logs to this file (defaults to LOG_FILE).")
def main(log_level: str, log_file: str) -> None:
    """dockind: infer schemas and document kinds from MongoDB collections."""
    settings = get_config().logging
    log_file = log_file or settings.file
    setup_logging(
        level=log_level or settings.level,
        log_file=log_file,
        enable_file_logging=bool(log_file),
    )


@main.command()
def databases() -> None:
    """List database names."""
    client, engineer = _open_engineer()
    try:
        _echo_json(engineer.get_database_names())
    except ReverseEngineeringError as e:
        raise click.ClickException(str(e)) from e
    finally:
        client.disconnect()


@main.command()
@click.option("--database", "-d", default=None, help="Database name (defaults to MONGO_DATABASE).")
@click.option("--exclude", "-x", multiple=True, help="Field never chosen as document kind.")
@click.option("--save/--no-save", default=False, help="Persist results to METADATA_DIR.")
def kinds(database: str, exclude: Tuple[str, ...], save: bool) -> None:
    """Detect the document-kind field of every collection."""
    client, engineer = _open_engineer()
    database = database or client.database
    try:
        report = engineer.discover(database, list(exclude) if exclude else None)
    except ReverseEngineeringError as e:
        raise click.ClickException(str(e)) from e
    finally:
        client.disconnect()

    if save:
        MetadataStore(get_config().metadata_dir).save_all(database, report.results, report.schemas)
    _echo_json([result.to_dict() for result in report.results])


@main.command()
@click.option("--database", "-d", default=None, help="Database name (defaults to MONGO_DATABASE).")
@click.option("--kind", "-k", "kind_options", multiple=True, metavar="COLLECTION=FIELD",
              help="Kind field to enumerate for a collection.")
def collections(database: str, kind_options: Tuple[str, ...]) -> None:
    """List collections with the distinct values of their kind field."""
    document_kinds = _parse_kind_options(kind_options)
    client, engineer = _open_engineer()
    database = database or client.database
    try:
        items = engineer.get_collection_names(database, document_kinds)
    except ReverseEngineeringError as e:
        raise click.ClickException(str(e)) from e
    finally:
        client.disconnect()
    _echo_json([item.to_dict() for item in items])


@main.command()
@click.option("--database", "-d", default=None, help="Database name (defaults to MONGO_DATABASE).")
@click.option("--collection", "-c", required=True, help="Collection to profile.")
@click.option("--sample-size", type=click.IntRange(min=1), default=None,
              help="Distinct values kept per field (default PROFILE_SAMPLE_SIZE).")
def infer(database: str, collection: str, sample_size: int) -> None:
    """Profile the top-level fields of one collection."""
    client, engineer = _open_engineer()
    database = database or client.database
    try:
        schema = engineer.infer_collection(database, collection, sample_size)
    except ReverseEngineeringError as e:
        raise click.ClickException(str(e)) from e
    finally:
        client.disconnect()
    _echo_json(schema.to_dict())


if __name__ == "__main__":
    main()
