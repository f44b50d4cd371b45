"""API resource types for the CDF REST API.

Pydantic models mirroring the JSON returned by the time series, units and
data modeling endpoints. Field names are snake_case in Python and camelCase
on the wire. Unknown fields are ignored so newer API versions keep
validating.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model translating between snake_case and the API's camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_api(self) -> dict[str, Any]:
        """Serialize for a request body, omitting unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


# Common


class Identity(ApiModel):
    id: int | None = None
    external_id: str | None = None


class InstanceId(ApiModel):
    space: str
    external_id: str


class TimestampRange(ApiModel):
    """Inclusive range in milliseconds since epoch."""

    min: int | None = None
    max: int | None = None


# Time series


class TimeSeries(ApiModel):
    """Time series metadata."""

    id: int
    external_id: str | None = None
    instance_id: InstanceId | None = None
    name: str | None = None
    is_string: bool = False
    metadata: dict[str, str] | None = None
    unit: str | None = None
    unit_external_id: str | None = None
    asset_id: int | None = None
    is_step: bool = False
    description: str | None = None
    security_categories: list[int] | None = None
    data_set_id: int | None = None
    created_time: int = 0
    last_updated_time: int = 0


class TimeSeriesList(ApiModel):
    items: list[TimeSeries] = []
    next_cursor: str | None = None


class TimeSeriesFilter(ApiModel):
    """Filter for ``POST /timeseries/list``. Unset fields are not sent."""

    name: str | None = None
    unit: str | None = None
    unit_external_id: str | None = None
    unit_quantity: str | None = None
    is_string: bool | None = None
    is_step: bool | None = None
    metadata: dict[str, str] | None = None
    asset_ids: list[int] | None = None
    asset_external_ids: list[str] | None = None
    root_asset_ids: list[int] | None = None
    asset_subtree_ids: list[Identity] | None = None
    data_set_ids: list[Identity] | None = None
    external_id_prefix: str | None = None
    created_time: TimestampRange | None = None
    last_updated_time: TimestampRange | None = None


class TimeSeriesSortItem(ApiModel):
    property: list[str]
    order: str | None = None
    nulls: str | None = None


class DataPointsQueryItem(ApiModel):
    """One entry of a data point retrieval request.

    Identify the series by exactly one of ``id``, ``external_id`` or
    ``instance_id``. Per-item settings override the request level ones.
    """

    id: int | None = None
    external_id: str | None = None
    instance_id: InstanceId | None = None
    start: str | int | None = None
    end: str | int | None = None
    limit: int | None = None
    aggregates: list[str] | None = None
    granularity: str | None = None
    target_unit: str | None = None
    target_unit_system: str | None = None
    include_outside_points: bool | None = None
    include_status: bool | None = None
    ignore_bad_data_points: bool | None = None
    treat_uncertain_as_bad: bool | None = None
    time_zone: str | None = None
    cursor: str | None = None


class LatestDataPointsQueryItem(ApiModel):
    id: int | None = None
    external_id: str | None = None
    instance_id: InstanceId | None = None
    before: str | int | None = None
    target_unit: str | None = None
    target_unit_system: str | None = None
    include_status: bool | None = None
    ignore_bad_data_points: bool | None = None
    treat_uncertain_as_bad: bool | None = None


class LatestDatapoint(ApiModel):
    timestamp: int
    value: float | str | None = None


class LatestDatapoints(ApiModel):
    id: int
    external_id: str | None = None
    instance_id: InstanceId | None = None
    is_string: bool = False
    is_step: bool = False
    unit: str | None = None
    unit_external_id: str | None = None
    datapoints: list[LatestDatapoint] = []


class LatestDataPointList(ApiModel):
    items: list[LatestDatapoints] = []


# Units


class UnitConversion(ApiModel):
    multiplier: float
    offset: float


class Unit(ApiModel):
    external_id: str
    name: str
    long_name: str = ""
    symbol: str = ""
    alias_names: list[str] = []
    quantity: str = ""
    conversion: UnitConversion
    source: str | None = None
    source_reference: str | None = None


class UnitList(ApiModel):
    items: list[Unit] = []


# Data modeling


class ViewReference(ApiModel):
    space: str
    external_id: str
    version: str
    type: str = "view"


class DataModel(ApiModel):
    space: str
    external_id: str
    name: str | None = None
    description: str | None = None
    version: str
    views: list[ViewReference] = []
    created_time: int = 0
    last_updated_time: int = 0
    is_global: bool = False


class DataModelList(ApiModel):
    items: list[DataModel] = []
    next_cursor: str | None = None


class NodeDefinition(ApiModel):
    instance_type: str
    version: int
    space: str
    external_id: str
    type: InstanceId | None = None
    created_time: int = 0
    last_updated_time: int = 0
    deleted_time: int | None = None
    # space -> "view/version" -> property -> value
    properties: dict[str, Any] = {}


class NodeList(ApiModel):
    items: list[NodeDefinition] = []
    typing: dict[str, Any] | None = None


class UnitReferenceDM(ApiModel):
    external_id: str | None = None
    unit_system_name: str | None = None


class TargetUnitsDM(ApiModel):
    property: str
    unit: UnitReferenceDM


class SearchSort(ApiModel):
    property: list[str]
    direction: str | None = None


class GraphQLError(ApiModel):
    message: str
    locations: list[dict[str, Any]] | None = None
    path: list[str | int] | None = None


class GraphQLResponse(ApiModel):
    data: dict[str, Any] | None = None
    errors: list[GraphQLError] | None = None
