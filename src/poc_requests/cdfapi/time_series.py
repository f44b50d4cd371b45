"""Time series endpoints: metadata listing, filtering and data points."""

from collections.abc import Sequence
from typing import Any

import structlog

from .datapoints import DataPointListResponse, decode_datapoints
from .session import APISession
from .types import (
    DataPointsQueryItem,
    LatestDataPointList,
    LatestDataPointsQueryItem,
    TimeSeriesFilter,
    TimeSeriesList,
    TimeSeriesSortItem,
)
from .utils import drop_none

logger = structlog.get_logger(__name__)


class TimeSeriesAPI:
    """Time series resource of a CDF project."""

    def __init__(self, session: APISession):
        self._session = session

    def list(
        self,
        limit: int = 100,
        include_metadata: bool = False,
        cursor: str | None = None,
        partition: str | None = None,
        asset_ids: Sequence[int] | None = None,
        root_asset_ids: Sequence[int] | None = None,
        external_id_prefix: str | None = None,
    ) -> TimeSeriesList:
        """List time series, one page at a time.

        Args:
            limit: Maximum number of time series to return.
            include_metadata: Whether to include the metadata field.
            cursor: Cursor from a previous page.
            partition: Partition specifier, e.g. "1/10".
            asset_ids: Only time series attached to these assets.
            root_asset_ids: Only time series under these root assets.
            external_id_prefix: Only external ids starting with this prefix.

        Returns:
            The page of time series and the cursor of the next one.
        """
        params = {
            "limit": limit,
            "includeMetadata": include_metadata,
            "cursor": cursor,
            "partition": partition,
            "assetIds": list(asset_ids) if asset_ids else None,
            "rootAssetIds": list(root_asset_ids) if root_asset_ids else None,
            "externalIdPrefix": external_id_prefix,
        }
        return self._session.get(
            self._session.project_path("timeseries"),
            TimeSeriesList,
            action="failed to fetch timeseries",
            params=params,
        )

    def filter(
        self,
        filter: TimeSeriesFilter | None = None,  # noqa: A002
        advanced_filter: dict[str, Any] | None = None,
        limit: int = 100,
        cursor: str | None = None,
        partition: str | None = None,
        sort: Sequence[TimeSeriesSortItem] | None = None,
    ) -> TimeSeriesList:
        """List time series matching a filter.

        Args:
            filter: Simple attribute filter.
            advanced_filter: Advanced filter expression, passed through as is.
            limit: Maximum number of time series to return.
            cursor: Cursor from a previous page.
            partition: Partition specifier, e.g. "1/10".
            sort: Sort order of the results.

        Returns:
            The matching time series and the cursor of the next page.
        """
        body = drop_none(
            {
                "filter": filter.to_api() if filter is not None else None,
                "advancedFilter": advanced_filter,
                "limit": limit,
                "cursor": cursor,
                "partition": partition,
                "sort": [s.to_api() for s in sort] if sort is not None else None,
            },
        )
        return self._session.post(
            self._session.project_path("timeseries/list"),
            body,
            TimeSeriesList,
            action="failed to fetch timeseries",
        )

    def retrieve_data(
        self,
        items: Sequence[DataPointsQueryItem],
        start: str | int | None = None,
        end: str | int | None = None,
        limit: int | None = None,
        aggregates: Sequence[str] | None = None,
        granularity: str | None = None,
        include_outside_points: bool | None = None,
        ignore_unknown_ids: bool | None = None,
    ) -> DataPointListResponse:
        """Retrieve data points for one or more time series.

        The request body is sent gzip-compressed and the response is
        decoded from protocol buffers, which is considerably faster than
        JSON for large requests. Request level settings apply to items that
        do not set their own.

        Args:
            items: Time series to retrieve, with optional per-item settings.
            start: Inclusive start, epoch ms or a relative time like "2d-ago".
            end: Exclusive end, epoch ms or a relative time like "now".
            limit: Maximum number of data points per time series.
            aggregates: Aggregates to compute, e.g. ["average"].
            granularity: Aggregate granularity, e.g. "1h".
            include_outside_points: Include the points just outside the range.
            ignore_unknown_ids: Skip unknown time series instead of failing.

        Returns:
            One item per time series, each holding numeric, string or
            aggregate data points.
        """
        body = drop_none(
            {
                "items": [item.to_api() for item in items],
                "start": start,
                "end": end,
                "limit": limit,
                "aggregates": list(aggregates) if aggregates is not None else None,
                "granularity": granularity,
                "includeOutsidePoints": include_outside_points,
                "ignoreUnknownIds": ignore_unknown_ids,
            },
        )
        content = self._session.post_protobuf(
            self._session.project_path("timeseries/data/list"),
            body,
            action="failed to fetch datapoints",
        )
        response = decode_datapoints(content)
        logger.debug(
            "Decoded data points",
            items=len(response.items),
            bytes=len(content),
        )
        return response

    def retrieve_latest(
        self,
        items: Sequence[LatestDataPointsQueryItem],
        ignore_unknown_ids: bool | None = None,
    ) -> LatestDataPointList:
        """Retrieve the latest data point of one or more time series."""
        body = drop_none(
            {
                "items": [item.to_api() for item in items],
                "ignoreUnknownIds": ignore_unknown_ids,
            },
        )
        return self._session.post(
            self._session.project_path("timeseries/data/latest"),
            body,
            LatestDataPointList,
            action="failed to fetch latest datapoints",
        )
