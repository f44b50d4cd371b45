"""Demo command line program for the CDF API client.

Credentials and project are read from the environment, see
:mod:`poc_requests.config`.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from . import plotting
from .cdfapi import CogniteClient, CogniteError, types
from .config import configure_logging, create_client, load_settings


@dataclass
class CLIState:
    client: Optional[CogniteClient] = None


app = typer.Typer(
    help=(
        "Try out the CDF REST API: time series, units and data modeling.\n\n"
        "Reads CLIENT_ID, CLIENT_SECRET, TENANT_ID, CDF_CLUSTER and CDF_PROJECT "
        "from the environment (optionally CDF_CLIENT_NAME, LOG_LEVEL and "
        "CDF_TIMEOUT). To use a .env file, export it into the shell first, "
        "e.g. `set -a; . ./.env; set +a`."
    ),
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)


def _fail(error: Exception) -> typer.Exit:
    typer.secho(f"Error: {error}", fg=typer.colors.RED, err=True)
    return typer.Exit(code=1)


def _get_client(ctx: typer.Context) -> CogniteClient:
    """Return the client, authenticating on first use."""
    state = ctx.ensure_object(CLIState)
    if state.client is not None:
        return state.client

    try:
        settings = load_settings()
    except ValueError as exc:
        raise _fail(exc) from exc
    configure_logging(settings.log_level)

    try:
        state.client = create_client(settings)
    except CogniteError as exc:
        raise _fail(exc) from exc
    ctx.call_on_close(state.client.close)
    return state.client


@app.callback()
def main(ctx: typer.Context) -> None:
    """Connect to the CDF project configured in the environment."""
    ctx.obj = CLIState()


@app.command("timeseries")
def timeseries_command(
    ctx: typer.Context,
    limit: int = typer.Option(100, "--limit", "-l", help="Maximum number of time series."),
    unit_quantity: str = typer.Option(
        "Pressure",
        "--unit-quantity",
        help="Quantity to filter on, e.g. Pressure or Temperature.",
    ),
) -> None:
    """List time series and filter them by unit quantity."""
    client = _get_client(ctx)
    try:
        ts_list = client.time_series.list(limit=limit)
        typer.echo(f"Time Series Count: {len(ts_list.items)}")

        filtered = client.time_series.filter(
            filter=types.TimeSeriesFilter(unit_quantity=unit_quantity),
            limit=limit,
        )
    except CogniteError as exc:
        raise _fail(exc) from exc
    typer.echo(f"Filtered Time Series Count: {len(filtered.items)}")


@app.command("units")
def units_command(ctx: typer.Context) -> None:
    """List the units catalog."""
    client = _get_client(ctx)
    try:
        units = client.units.list()
    except CogniteError as exc:
        raise _fail(exc) from exc
    typer.echo(f"Units Count: {len(units.items)}")


@app.command("datamodels")
def datamodels_command(
    ctx: typer.Context,
    limit: int = typer.Option(10, "--limit", "-l", help="Maximum number of data models."),
    space: Optional[str] = typer.Option(None, "--space", help="Only models in this space."),
    include_global: bool = typer.Option(
        False,
        "--include-global/--no-include-global",
        help="Include global (system) data models.",
    ),
) -> None:
    """List data models."""
    client = _get_client(ctx)
    try:
        models = client.data_modeling.list_data_models(
            limit=limit,
            space=space,
            include_global=include_global,
        )
    except CogniteError as exc:
        raise _fail(exc) from exc
    typer.echo(f"Data Models Count: {len(models.items)}")
    for model in models.items:
        typer.echo(f"  - {model.space}:{model.external_id}/{model.version}")


@app.command("datapoints")
def datapoints_command(
    ctx: typer.Context,
    external_id: str = typer.Argument(..., help="External id of the time series."),
    start: str = typer.Option("300d-ago", "--start", help="Start of the range."),
    end: str = typer.Option("now", "--end", help="End of the range."),
    limit: int = typer.Option(100000, "--limit", "-l", help="Maximum number of data points."),
) -> None:
    """Retrieve raw data points and report how long it took."""
    client = _get_client(ctx)
    items = [types.DataPointsQueryItem(external_id=external_id, start=start, end=end, limit=limit)]

    started = time.perf_counter()
    try:
        response = client.time_series.retrieve_data(items)
    except CogniteError as exc:
        raise _fail(exc) from exc
    elapsed = time.perf_counter() - started

    if not response.items:
        raise _fail(ValueError(f"no data points returned for {external_id}"))
    item = response.items[0]
    typer.echo(f"Data Points External ID: {item.external_id}")
    typer.echo(f"Data Points Unit: {item.unit_external_id or ''}")
    typer.echo(f"Data Points Type: {item.datapoints.kind}")
    typer.echo(f"Data Points Count: {len(item.datapoints.datapoints)}")
    typer.echo(f"Time taken: {elapsed:.3f}s")


@app.command("plot")
def plot_command(
    ctx: typer.Context,
    external_id: str = typer.Argument(..., help="External id of the time series."),
    start: str = typer.Option("300d-ago", "--start", help="Start of the range."),
    end: str = typer.Option("now", "--end", help="End of the range."),
    aggregate: str = typer.Option("average", "--aggregate", "-a", help="Aggregate to plot."),
    granularity: str = typer.Option("1h", "--granularity", "-g", help="Aggregate granularity."),
    limit: int = typer.Option(10000, "--limit", "-l", help="Maximum number of aggregates."),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        dir_okay=False,
        help="Write the chart to this HTML file instead of opening it.",
    ),
) -> None:
    """Retrieve aggregates of a time series and plot them."""
    try:
        api_aggregate = plotting.to_api_aggregate(aggregate)
    except ValueError as exc:
        raise _fail(exc) from exc

    client = _get_client(ctx)
    items = [
        types.DataPointsQueryItem(
            external_id=external_id,
            start=start,
            end=end,
            aggregates=[api_aggregate],
            granularity=granularity,
            limit=limit,
        ),
    ]

    started = time.perf_counter()
    try:
        response = client.time_series.retrieve_data(items)
    except CogniteError as exc:
        raise _fail(exc) from exc
    elapsed = time.perf_counter() - started

    if not response.items:
        raise _fail(ValueError(f"no data points returned for {external_id}"))
    item = response.items[0]
    try:
        fig = plotting.build_figure(
            item,
            aggregate=aggregate,
            title=(
                f"Fetched {len(item.datapoints.datapoints)} data points"
                f" - {granularity} {aggregate}"
            ),
        )
    except ValueError as exc:
        raise _fail(exc) from exc

    typer.echo(f"Data Points Count: {len(item.datapoints.datapoints)}")
    typer.echo(f"Time taken: {elapsed:.3f}s")
    if output is not None:
        fig.write_html(str(output))
        typer.secho(f"Chart written to {output}", fg=typer.colors.GREEN)
    else:
        fig.show()
