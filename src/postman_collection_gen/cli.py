"""CLI entry point for postman-collection-gen."""

import logging
from pathlib import Path

import click

from postman_collection_gen.config import GeneratorSettings, load_settings
from postman_collection_gen.errors import ConfigError
from postman_collection_gen.generator.collection import request_name, sort_records
from postman_collection_gen.logger import set_log_level
from postman_collection_gen.pipeline import collect_requests, run_generator


def _source_options(func):
    """Options shared by every command that scans a source tree."""
    options = [
        click.option("--root", "root_dir", type=click.Path(path_type=Path), envvar="POSTMAN_GEN_ROOT", default=None, help="Directory holding the numbered source dirs (default: ./tools)."),
        click.option("--base-dir", type=click.Path(file_okay=False, path_type=Path), default=None, help="Directory that relative paths and request names are based on (default: cwd)."),
        click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None, help="YAML config file."),
        click.option("--client", "client_name", default=None, help="Identifier of the HTTP client object (default: axios)."),
        click.option("--ext", "extensions", multiple=True, help="Source file extension to scan; repeatable (default: .js)."),
        click.option("-v", "--verbose", count=True, help="Log more; repeat for debug output."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _load(config_path: Path | None, verbose: int, extensions: tuple[str, ...], **overrides) -> GeneratorSettings:
    if verbose:
        set_log_level(logging.DEBUG if verbose > 1 else logging.INFO)
    try:
        return load_settings(config_path, extensions=extensions or None, **overrides)
    except ConfigError as e:
        raise click.UsageError(str(e)) from e


@click.group()
def main():
    """Postman Collection Gen — build a Postman collection from axios call sites."""
    pass


@main.command()
@_source_options
@click.option("--name", "collection_name", envvar="POSTMAN_GEN_NAME", default=None, help="Collection display name.")
@click.option("--out-dir", type=click.Path(file_okay=False, path_type=Path), default=None, help="Output directory (default: ./generate_postman_schema).")
def generate(root_dir, base_dir, config_path, client_name, extensions, verbose, collection_name, out_dir):
    """Scan the numbered source dirs and write the collection and environment template."""
    settings = _load(
        config_path,
        verbose,
        extensions,
        root_dir=root_dir,
        base_dir=base_dir,
        client_name=client_name,
        collection_name=collection_name,
        out_dir=out_dir,
    )

    click.echo(f"Scanning numbered source dirs in {settings.root_path}...")
    try:
        report = run_generator(settings)
    except OSError as e:
        raise click.ClickException(f"Failed to write output: {e}") from e

    click.echo(f"Source files found: {report.file_count}")
    click.echo(f"Requests extracted: {report.record_count}")
    click.echo(f"Generated: {report.collection_path}")
    click.echo(f"Generated: {report.environment_path}")


@main.command()
@_source_options
def scan(root_dir, base_dir, config_path, client_name, extensions, verbose):
    """List the requests that would be generated, without writing any file."""
    settings = _load(
        config_path,
        verbose,
        extensions,
        root_dir=root_dir,
        base_dir=base_dir,
        client_name=client_name,
    )

    files, records = collect_requests(settings)
    for record in sort_records(records):
        click.echo(request_name(record, settings.base_dir))
    click.echo(f"Found {len(records)} requests in {len(files)} files.")
