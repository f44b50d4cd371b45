"""Plotting of retrieved aggregate series with plotly."""

from dataclasses import fields
from datetime import datetime, timezone

import plotly.graph_objects as go
from pydantic.alias_generators import to_camel

from .cdfapi import datapoints

AGGREGATES = tuple(
    f.name for f in fields(datapoints.AggregateDatapoint) if f.name != "timestamp"
)


def _check_aggregate(aggregate: str) -> None:
    if aggregate not in AGGREGATES:
        msg = f"unknown aggregate {aggregate!r}, expected one of {', '.join(AGGREGATES)}"
        raise ValueError(msg)


def to_api_aggregate(aggregate: str) -> str:
    """Return the API name of an aggregate, e.g. "stepInterpolation".

    Raises:
        ValueError: If the aggregate is unknown.
    """
    _check_aggregate(aggregate)
    return to_camel(aggregate)


def aggregate_series(
    item: datapoints.DataPointListItem,
    aggregate: str = "average",
) -> tuple[list[datetime], list[float]]:
    """Extract one aggregate of an item as timestamps and values.

    Args:
        item: Data points of a time series retrieved with aggregates.
        aggregate: Aggregate to extract, in snake_case (e.g. "average").

    Returns:
        UTC timestamps and the matching aggregate values.

    Raises:
        ValueError: If the item holds raw data points or the aggregate is
            unknown.
    """
    _check_aggregate(aggregate)
    if not isinstance(item.datapoints, datapoints.AggregateDatapoints):
        msg = (
            f"time series {item.external_id or item.id} holds "
            f"{item.datapoints.kind} data points, not aggregates"
        )
        raise ValueError(msg)

    timestamps = []
    values = []
    for dp in item.datapoints.datapoints:
        timestamps.append(datetime.fromtimestamp(dp.timestamp / 1000, tz=timezone.utc))
        values.append(getattr(dp, aggregate))
    return timestamps, values


def build_figure(
    item: datapoints.DataPointListItem,
    aggregate: str = "average",
    title: str | None = None,
) -> go.Figure:
    """Build a line chart of one aggregate of a time series."""
    timestamps, values = aggregate_series(item, aggregate)
    title = title or f"Fetched {len(values)} data points - {aggregate}"

    fig = go.Figure(
        data=[
            go.Scatter(
                x=timestamps,
                y=values,
                name=item.external_id or str(item.id),
            ),
        ],
    )
    fig.update_layout(
        title={"text": title, "font": {"size": 24}},
        font={"family": "Roboto", "size": 12, "color": "black"},
        xaxis={
            "showspikes": True,
            "spikemode": "across",
            "spikethickness": 1,
            "spikedash": "solid",
        },
        yaxis={"title": {"text": item.unit or ""}},
        spikedistance=-1,
        legend={
            "orientation": "h",
            "yanchor": "bottom",
            "y": 1.02,
            "xanchor": "right",
            "x": 1.0,
        },
        showlegend=True,
        height=800,
    )
    return fig
