"""Click CLI with analyze, clean-cache, and serve subcommands."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from pcritical import __version__
from pcritical.cache import remove_cache
from pcritical.errors import PcriticalError
from pcritical.models import AnalysisConfig, default_cache_dir
from pcritical.pipeline import run_analysis

_cache_dir_option = click.option(
    "--cache-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="PCRITICAL_CACHE_DIR",
    default=None,
    help="Cache directory for 'go list' and size queries",
)


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="pcritical: %(levelname)s %(name)s: %(message)s")


@click.group()
@click.version_option(version=__version__)
def cli():
    """pcritical: find the chain of Go packages that dominates build time."""


@cli.command()
@click.argument("target")
@click.option("--dotout", "dot_output", type=click.Path(dir_okay=False, path_type=Path),
              default="tmp.dot", show_default=True, help="DOT file to emit")
@_cache_dir_option
@click.option("--nostd", "skip_standard", is_flag=True, help="Ignore standard library deps")
@click.option("--include-unsafe", is_flag=True, help='Include the "unsafe" package')
@click.option("--polyline", is_flag=True, help="Add splines=polyline to the DOT graph")
@click.option("--full-graph", is_flag=True, help="Emit every node, not only the critical path")
@click.option("--workers", "-j", type=click.IntRange(min=1), default=None,
              help="Parallel 'go list' queries (default: CPU count)")
@click.option("--verbose", "-v", count=True, help="Trace output level (-v, -vv)")
def analyze(
    target: str,
    dot_output: Path,
    cache_dir: Path | None,
    skip_standard: bool,
    include_unsafe: bool,
    polyline: bool,
    full_graph: bool,
    workers: int | None,
    verbose: int,
):
    """Analyze TARGET and print its critical path."""
    _configure_logging(verbose)

    config = AnalysisConfig(
        target=target,
        dot_output=dot_output,
        skip_standard=skip_standard,
        include_unsafe=include_unsafe,
        polyline=polyline,
        full_graph=full_graph,
    )
    if cache_dir is not None:
        config.cache_dir = cache_dir
    if workers is not None:
        config.workers = workers
        config.size_workers = max(1, workers // 2)

    def progress(stage: str, current: int, total: int):
        if verbose:
            click.echo(f"  {stage}: {current}/{total}")

    try:
        result = run_analysis(config, progress=progress)
    except PcriticalError as e:
        raise click.ClickException(str(e))

    if result.dot_path is not None:
        click.echo(f"... created DOT file {result.dot_path}")
    click.echo(f"\nCritical path:\n{result.report}")
    click.echo(f"Total estimated cost: {result.path.total_cost}")


@cli.command("clean-cache")
@_cache_dir_option
def clean_cache(cache_dir: Path | None):
    """Delete the on-disk query cache."""
    directory = cache_dir or default_cache_dir()
    try:
        removed = remove_cache(directory)
    except PcriticalError as e:
        raise click.ClickException(str(e))
    if removed:
        click.echo(f"Removed {directory}")
    else:
        click.echo(f"No cache at {directory}")


@cli.command()
@click.option("--port", "-p", default=8421, help="Port number")
@click.option("--host", default="127.0.0.1", help="Host address")
def serve(port: int, host: str):
    """Start the JSON API."""
    try:
        import uvicorn
    except ImportError:
        raise click.ClickException(
            "uvicorn is required for the web API. "
            "Install with: pip install 'pcritical[web]'"
        )

    from pcritical.web import create_app

    click.echo(f"Starting pcritical API at http://{host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_level="info")


if __name__ == "__main__":
    cli()
