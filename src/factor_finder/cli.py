import logging
from typing import Optional, Tuple

import click
from rich.console import Console
import uvicorn

from factor_finder.api import app
from factor_finder.client import RemoteSearchError, submit_search
from factor_finder.config import DEFAULT_CONFIG, EngineConfig
from factor_finder.errors import FactorFinderError
from factor_finder.logs import configure_logging, get_ui_log_handler
from factor_finder.models.commands import (
    SearchCommand,
    SearchMode,
    StartResolve,
    StartSgs,
    StartSMin,
    StartTrial,
    build_command,
)
from factor_finder.numeric.bigint import to_decimal
from factor_finder.search_task import SearchController
from factor_finder.ui import SearchView, plain_loop, render_summary, ui_loop

LOG_LEVELS = ["debug", "info", "warning", "error"]


@click.group(context_settings={"auto_envvar_prefix": "FACTOR_FINDER"})
@click.option("--batch-size", type=click.IntRange(min=1), default=None, help="S candidates per batch event.")
@click.option("--progress-interval", type=click.IntRange(min=1), default=None, help="Loop iterations between progress events.")
@click.option("--log-level", type=click.Choice(LOG_LEVELS), default="info", show_default=True)
@click.pass_context
def cli(ctx: click.Context, batch_size: Optional[int], progress_interval: Optional[int], log_level: str):
    """Find factors of N = a^b + c."""
    ctx.obj = DEFAULT_CONFIG.with_overrides(batch_size=batch_size, progress_interval=progress_interval)
    configure_logging(level=getattr(logging, log_level.upper()), handler=get_ui_log_handler())


def target_options(fn):
    """Shared --base/--exponent/--addend options. Values stay decimal strings until the task parses them."""

    options = [
        click.option("--base", "-a", default="10", show_default=True, help="Base a."),
        click.option("--exponent", "-b", default="3", show_default=True, help="Exponent b."),
        click.option("--addend", "-c", default="729", show_default=True, help="Addend c."),
        click.option("--plain", is_flag=True, help="Print one line per event instead of the live view."),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


def solver(config: EngineConfig, command: SearchCommand, title: str, plain: bool) -> SearchView:
    """Run one search on a background task and render its events until it ends."""
    console = Console()
    controller = SearchController(config)
    view = SearchView(title=title)
    task = controller.start(command)

    try:
        if plain:
            plain_loop(task.events, view, console)
        else:
            ui_loop(task.events, view, console)
    except KeyboardInterrupt:
        controller.stop()
        view.status = "Stopped by user"
        console.print("Search stopped by user.", style="yellow")

    if not plain:
        console.print(render_summary(view))
    if view.error is not None:
        raise click.exceptions.Exit(1)
    return view


@cli.command("s-min")
@target_options
@click.pass_obj
def s_min(config: EngineConfig, base: str, exponent: str, addend: str, plain: bool):
    """Find the least S with S^2 > 4N."""
    command = StartSMin(base=base, exponent=exponent, addend=addend)
    solver(config, command, "S_min", plain)


@cli.command()
@target_options
@click.option("--max", "max_divisor", default="2000", show_default=True, help="Largest divisor tried.")
@click.pass_obj
def trial(config: EngineConfig, base: str, exponent: str, addend: str, plain: bool, max_divisor: str):
    """Trial division by every integer in [2, max]."""
    command = StartTrial(base=base, exponent=exponent, addend=addend, max=max_divisor)
    solver(config, command, "Trial Division", plain)


@cli.command()
@target_options
@click.option("--min", "s_lower", default="1", show_default=True, help="Smallest S screened.")
@click.option("--max", "s_upper", default="2000", show_default=True, help="Largest S screened.")
@click.option(
    "--candidates-out",
    "-o",
    type=click.File("w"),
    help="Write surviving S values one per line, ready for `resolve --candidates-file`.",
)
@click.pass_obj
def sgs(
    config: EngineConfig,
    base: str,
    exponent: str,
    addend: str,
    plain: bool,
    s_lower: str,
    s_upper: str,
    candidates_out,
):
    """Screen S values in [min, max] with the quadratic-residue filter."""
    command = StartSgs(base=base, exponent=exponent, addend=addend, min=s_lower, max=s_upper)
    view = solver(config, command, "SGS Filter", plain)
    if candidates_out is not None:
        for s in view.results.candidates:
            candidates_out.write(f"{to_decimal(s)}\n")


@cli.command()
@target_options
@click.argument("candidates", nargs=-1)
@click.option("--candidates-file", "-f", type=click.File("r"), help="File with one S candidate per line.")
@click.pass_obj
def resolve(
    config: EngineConfig,
    base: str,
    exponent: str,
    addend: str,
    plain: bool,
    candidates: Tuple[str, ...],
    candidates_file,
):
    """Recover factor pairs from candidate sums S."""
    s_candidates = list(candidates)
    if candidates_file is not None:
        s_candidates.extend(line.strip() for line in candidates_file if line.strip())
    command = StartResolve(base=base, exponent=exponent, addend=addend, s_candidates=s_candidates)
    solver(config, command, "SAS Resolver", plain)


@cli.command()
@click.option("--url", default="http://127.0.0.1:8000", show_default=True, help="Base URL of a running API.")
@click.option("--mode", type=click.Choice([m.value for m in SearchMode]), default=SearchMode.TRIAL.value, show_default=True)
@click.option("--base", "-a", default="10", show_default=True)
@click.option("--exponent", "-b", default="3", show_default=True)
@click.option("--addend", "-c", default="729", show_default=True)
@click.option("--min", "s_lower", default="1", show_default=True)
@click.option("--max", "s_upper", default="2000", show_default=True)
@click.option("--candidate", "-s", "candidates", multiple=True, help="S candidate for resolve mode; repeatable.")
@click.option("--timeout", default=60.0, show_default=True, help="HTTP timeout in seconds.")
def remote(url, mode, base, exponent, addend, s_lower, s_upper, candidates, timeout):
    """Run a search on a remote API and print the result."""
    try:
        command = build_command(mode, base, exponent, addend, min=s_lower, max=s_upper, s_candidates=candidates)
        body = submit_search(url, command, timeout=timeout)
    except (RemoteSearchError, FactorFinderError) as e:
        raise click.ClickException(str(e))

    click.echo(f"state: {body['state']}")
    if body.get("n") is not None:
        click.echo(f"N = {body['n']}")
    for found in body["factors"]:
        click.echo(f"factor {found['factor']} ({found['method']})")
    if body["candidates"]:
        click.echo(f"candidates: {len(body['candidates'])}")
    if body.get("s_min") is not None:
        click.echo(f"s_min {body['s_min']}")
    for event in body["events"]:
        if event["type"] == "error":
            raise click.ClickException(f"{event['kind']}: {event['message']}")


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind the server to")
@click.option("--port", default=8000, help="Port to bind the server to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
def serve(host: str, port: int, reload: bool):
    """Start the HTTP API."""
    configure_logging(json=True)
    click.echo(f"Starting factor finder API on http://{host}:{port}")
    click.echo("Available endpoints:")
    click.echo("  - POST /api/search  - Run a search command")
    click.echo("  - GET  /api/target  - Compute N = a^b + c")
    click.echo("\nPress Ctrl+C to stop the server")

    if reload:
        # Use import string for reload mode
        uvicorn.run("factor_finder.api:app", host=host, port=port, reload=True)
    else:
        # Use app object for non-reload mode (faster startup)
        uvicorn.run(app, host=host, port=port, reload=False)


if __name__ == "__main__":
    cli()
