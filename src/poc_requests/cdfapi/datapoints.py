"""Data point payloads decoded from the protobuf retrieval response.

Every item in a response carries exactly one of three payloads: raw numeric
samples, raw string samples or aggregate samples. The payload types share a
``kind`` tag so callers can dispatch with ``match`` or a plain comparison.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal, TypeAlias

from google.protobuf.message import DecodeError

from . import _proto
from .errors import CogniteDecodeError, UnknownDatapointTypeError
from .types import InstanceId


@dataclass(frozen=True)
class Status:
    code: int = 0
    symbol: str = ""


@dataclass(frozen=True)
class NumericDatapoint:
    timestamp: int
    value: float | None
    status: Status | None = None


@dataclass(frozen=True)
class StringDatapoint:
    timestamp: int
    value: str | None
    status: Status | None = None


@dataclass(frozen=True)
class AggregateDatapoint:
    """One aggregated sample. Aggregates not requested are left at 0.0."""

    timestamp: int
    average: float = 0.0
    max: float = 0.0
    min: float = 0.0
    count: float = 0.0
    sum: float = 0.0
    interpolation: float = 0.0
    step_interpolation: float = 0.0
    continuous_variance: float = 0.0
    discrete_variance: float = 0.0
    total_variation: float = 0.0
    count_good: float = 0.0
    count_uncertain: float = 0.0
    count_bad: float = 0.0
    duration_good: float = 0.0
    duration_uncertain: float = 0.0
    duration_bad: float = 0.0


@dataclass(frozen=True)
class NumericDatapoints:
    datapoints: list[NumericDatapoint]
    kind: Literal["numeric"] = "numeric"


@dataclass(frozen=True)
class StringDatapoints:
    datapoints: list[StringDatapoint]
    kind: Literal["string"] = "string"


@dataclass(frozen=True)
class AggregateDatapoints:
    datapoints: list[AggregateDatapoint]
    kind: Literal["aggregate"] = "aggregate"


Datapoints: TypeAlias = NumericDatapoints | StringDatapoints | AggregateDatapoints


@dataclass(frozen=True)
class DataPointListItem:
    """Data points of a single time series."""

    id: int
    datapoints: Datapoints
    external_id: str | None = None
    instance_id: InstanceId | None = None
    is_string: bool = False
    is_step: bool = False
    unit: str | None = None
    unit_external_id: str | None = None
    next_cursor: str | None = None


@dataclass(frozen=True)
class DataPointListResponse:
    items: list[DataPointListItem]


def _status(message: Any) -> Status | None:
    if not message.HasField("status"):
        return None
    return Status(code=message.status.code, symbol=message.status.symbol)


def _numeric(payload: Any) -> NumericDatapoints:
    return NumericDatapoints(
        datapoints=[
            NumericDatapoint(
                timestamp=dp.timestamp,
                value=None if dp.nullValue else dp.value,
                status=_status(dp),
            )
            for dp in payload.datapoints
        ],
    )


def _string(payload: Any) -> StringDatapoints:
    return StringDatapoints(
        datapoints=[
            StringDatapoint(
                timestamp=dp.timestamp,
                value=None if dp.nullValue else dp.value,
                status=_status(dp),
            )
            for dp in payload.datapoints
        ],
    )


def _aggregate(payload: Any) -> AggregateDatapoints:
    return AggregateDatapoints(
        datapoints=[
            AggregateDatapoint(
                timestamp=dp.timestamp,
                average=dp.average,
                max=dp.max,
                min=dp.min,
                count=dp.count,
                sum=dp.sum,
                interpolation=dp.interpolation,
                step_interpolation=dp.stepInterpolation,
                continuous_variance=dp.continuousVariance,
                discrete_variance=dp.discreteVariance,
                total_variation=dp.totalVariation,
                count_good=dp.countGood,
                count_uncertain=dp.countUncertain,
                count_bad=dp.countBad,
                duration_good=dp.durationGood,
                duration_uncertain=dp.durationUncertain,
                duration_bad=dp.durationBad,
            )
            for dp in payload.datapoints
        ],
    )


# oneof field name -> converter
_VARIANTS: dict[str, Callable[[Any], Datapoints]] = {
    "numericDatapoints": _numeric,
    "stringDatapoints": _string,
    "aggregateDatapoints": _aggregate,
}


def _transform_item(item: Any) -> DataPointListItem:
    """Convert one protobuf item, dispatching on its payload variant.

    Raises:
        UnknownDatapointTypeError: If the item carries no known payload.
    """
    variant = item.WhichOneof("datapointType")
    if variant not in _VARIANTS:
        msg = (
            f"Unknown data point type {variant!r} for time series "
            f"id={item.id} externalId={item.externalId!r}"
        )
        raise UnknownDatapointTypeError(msg)
    convert = _VARIANTS[variant]

    instance_id = None
    if item.HasField("instanceId"):
        instance_id = InstanceId(
            space=item.instanceId.space,
            external_id=item.instanceId.externalId,
        )

    return DataPointListItem(
        id=item.id,
        datapoints=convert(getattr(item, variant)),
        external_id=item.externalId or None,
        instance_id=instance_id,
        is_string=item.isString,
        is_step=item.isStep,
        unit=item.unit or None,
        unit_external_id=item.unitExternalId or None,
        next_cursor=item.nextCursor or None,
    )


def decode_datapoints(content: bytes) -> DataPointListResponse:
    """Decode a protobuf ``DataPointListResponse`` body.

    Args:
        content: Raw response bytes.

    Returns:
        One item per requested time series, in response order.

    Raises:
        CogniteDecodeError: If the bytes are not a valid message.
        UnknownDatapointTypeError: If an item has no known payload variant.
    """
    message = _proto.DataPointListResponse()
    try:
        message.ParseFromString(content)
    except DecodeError as exc:
        msg = f"Malformed data point response: {exc}"
        raise CogniteDecodeError(msg) from exc
    return DataPointListResponse(items=[_transform_item(item) for item in message.items])
