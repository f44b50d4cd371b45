"""Protocol buffer schema of the data point retrieval response.

The CDF API answers ``POST /timeseries/data/list`` with a
``DataPointListResponse`` message when ``Accept: application/protobuf`` is
sent. The message classes are built at import time from a descriptor
assembled here, so no generated ``_pb2`` module has to be shipped.
"""

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

PACKAGE = "com.cognite.v1.timeseries.proto"

_Field = descriptor_pb2.FieldDescriptorProto

AGGREGATE_FIELDS = (
    "average",
    "max",
    "min",
    "count",
    "sum",
    "interpolation",
    "stepInterpolation",
    "continuousVariance",
    "discreteVariance",
    "totalVariation",
    "countGood",
    "countUncertain",
    "countBad",
    "durationGood",
    "durationUncertain",
    "durationBad",
)


def _field(
    name: str,
    number: int,
    field_type: int,
    type_name: str | None = None,
    repeated: bool = False,
    oneof_index: int | None = None,
) -> descriptor_pb2.FieldDescriptorProto:
    field = _Field(
        name=name,
        number=number,
        type=field_type,
        label=_Field.LABEL_REPEATED if repeated else _Field.LABEL_OPTIONAL,
        json_name=name,
    )
    if type_name is not None:
        field.type_name = f".{PACKAGE}.{type_name}"
    if oneof_index is not None:
        field.oneof_index = oneof_index
    return field


def _message(
    name: str,
    fields: list[descriptor_pb2.FieldDescriptorProto],
    oneofs: tuple[str, ...] = (),
) -> descriptor_pb2.DescriptorProto:
    message = descriptor_pb2.DescriptorProto(name=name)
    for oneof in oneofs:
        message.oneof_decl.add(name=oneof)
    message.field.extend(fields)
    return message


def _datapoint_list(name: str, item_type: str) -> descriptor_pb2.DescriptorProto:
    return _message(
        name,
        [_field("datapoints", 1, _Field.TYPE_MESSAGE, item_type, repeated=True)],
    )


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="poc_requests/data_point_list_response.proto",
        package=PACKAGE,
        syntax="proto3",
    )
    file_proto.message_type.extend(
        [
            _message(
                "Status",
                [
                    _field("code", 1, _Field.TYPE_INT64),
                    _field("symbol", 2, _Field.TYPE_STRING),
                ],
            ),
            _message(
                "InstanceId",
                [
                    _field("space", 1, _Field.TYPE_STRING),
                    _field("externalId", 2, _Field.TYPE_STRING),
                ],
            ),
            _message(
                "NumericDatapoint",
                [
                    _field("timestamp", 1, _Field.TYPE_INT64),
                    _field("value", 2, _Field.TYPE_DOUBLE),
                    _field("status", 3, _Field.TYPE_MESSAGE, "Status"),
                    _field("nullValue", 4, _Field.TYPE_BOOL),
                ],
            ),
            _datapoint_list("NumericDatapoints", "NumericDatapoint"),
            _message(
                "StringDatapoint",
                [
                    _field("timestamp", 1, _Field.TYPE_INT64),
                    _field("value", 2, _Field.TYPE_STRING),
                    _field("status", 3, _Field.TYPE_MESSAGE, "Status"),
                    _field("nullValue", 4, _Field.TYPE_BOOL),
                ],
            ),
            _datapoint_list("StringDatapoints", "StringDatapoint"),
            _message(
                "AggregateDatapoint",
                [
                    _field("timestamp", 1, _Field.TYPE_INT64),
                    *(
                        _field(name, number, _Field.TYPE_DOUBLE)
                        for number, name in enumerate(AGGREGATE_FIELDS, start=2)
                    ),
                ],
            ),
            _datapoint_list("AggregateDatapoints", "AggregateDatapoint"),
            _message(
                "DataPointListItem",
                [
                    _field("id", 1, _Field.TYPE_INT64),
                    _field("externalId", 2, _Field.TYPE_STRING),
                    _field(
                        "numericDatapoints",
                        3,
                        _Field.TYPE_MESSAGE,
                        "NumericDatapoints",
                        oneof_index=0,
                    ),
                    _field(
                        "stringDatapoints",
                        4,
                        _Field.TYPE_MESSAGE,
                        "StringDatapoints",
                        oneof_index=0,
                    ),
                    _field(
                        "aggregateDatapoints",
                        5,
                        _Field.TYPE_MESSAGE,
                        "AggregateDatapoints",
                        oneof_index=0,
                    ),
                    _field("isString", 6, _Field.TYPE_BOOL),
                    _field("isStep", 7, _Field.TYPE_BOOL),
                    _field("unit", 8, _Field.TYPE_STRING),
                    _field("nextCursor", 9, _Field.TYPE_STRING),
                    _field("unitExternalId", 10, _Field.TYPE_STRING),
                    _field("instanceId", 11, _Field.TYPE_MESSAGE, "InstanceId"),
                ],
                oneofs=("datapointType",),
            ),
            _message(
                "DataPointListResponse",
                [
                    _field(
                        "items",
                        1,
                        _Field.TYPE_MESSAGE,
                        "DataPointListItem",
                        repeated=True,
                    ),
                ],
            ),
        ],
    )
    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file().SerializeToString())


def _message_class(name: str):
    return message_factory.GetMessageClass(
        _pool.FindMessageTypeByName(f"{PACKAGE}.{name}"),
    )


DataPointListResponse = _message_class("DataPointListResponse")
DataPointListItem = _message_class("DataPointListItem")
NumericDatapoint = _message_class("NumericDatapoint")
StringDatapoint = _message_class("StringDatapoint")
AggregateDatapoint = _message_class("AggregateDatapoint")
