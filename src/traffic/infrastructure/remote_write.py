"""
Prometheus remote-write encoding of reconstructed samples.

The prompb messages are declared at runtime from a descriptor, so no
generated code needs to be shipped with the package.
"""
import logging
from collections import OrderedDict
from typing import Dict, List, Sequence, Tuple
import snappy
from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError, EncodeError
from ..domain.entities import SamplePoint
from ...common.exceptions import EncodingError
from ...common.logging import log_execution_time

logger = logging.getLogger(__name__)

OCCUPANCY_METRIC = "cars_on_road"
TOTAL_METRIC = "road_traffic_total"

_F = descriptor_pb2.FieldDescriptorProto


def _build_messages():
    proto = descriptor_pb2.FileDescriptorProto(
        name="traffic_exporter/prompb/remote.proto",
        package="prometheus",
        syntax="proto3",
    )

    label = proto.message_type.add(name="Label")
    label.field.add(name="name", number=1, type=_F.TYPE_STRING, label=_F.LABEL_OPTIONAL)
    label.field.add(name="value", number=2, type=_F.TYPE_STRING, label=_F.LABEL_OPTIONAL)

    sample = proto.message_type.add(name="Sample")
    sample.field.add(name="value", number=1, type=_F.TYPE_DOUBLE, label=_F.LABEL_OPTIONAL)
    sample.field.add(name="timestamp", number=2, type=_F.TYPE_INT64, label=_F.LABEL_OPTIONAL)

    series = proto.message_type.add(name="TimeSeries")
    series.field.add(name="labels", number=1, type=_F.TYPE_MESSAGE,
                     label=_F.LABEL_REPEATED, type_name=".prometheus.Label")
    series.field.add(name="samples", number=2, type=_F.TYPE_MESSAGE,
                     label=_F.LABEL_REPEATED, type_name=".prometheus.Sample")

    request = proto.message_type.add(name="WriteRequest")
    request.field.add(name="timeseries", number=1, type=_F.TYPE_MESSAGE,
                      label=_F.LABEL_REPEATED, type_name=".prometheus.TimeSeries")

    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(proto.SerializeToString())
    return (
        message_factory.GetMessageClass(pool.FindMessageTypeByName("prometheus.WriteRequest")),
        message_factory.GetMessageClass(pool.FindMessageTypeByName("prometheus.TimeSeries")),
    )


WriteRequest, TimeSeries = _build_messages()

SeriesKey = Tuple[Tuple[str, str], ...]


def series_labels(metric: str, point: SamplePoint) -> SeriesKey:
    """Label set of a series, sorted by label name as remote-write requires."""
    labels = {
        "__name__": metric,
        "road": point.road,
        "color": point.cohort.color,
        "maker": point.cohort.maker,
    }
    return tuple(sorted(labels.items()))


def group_series(samples: Sequence[SamplePoint]) -> "OrderedDict[SeriesKey, List[Tuple[int, float]]]":
    """
    Groups samples into one series per road x cohort x metric.
    Each series holds exactly its own samples, ordered by timestamp.
    """
    series: "OrderedDict[SeriesKey, List[Tuple[int, float]]]" = OrderedDict()
    for point in samples:
        ts = point.timestamp_ms
        series.setdefault(series_labels(OCCUPANCY_METRIC, point), []).append((ts, point.occupancy))
        series.setdefault(series_labels(TOTAL_METRIC, point), []).append((ts, point.total))

    for points in series.values():
        points.sort(key=lambda p: p[0])
    return series


class RemoteWriteEncoder:
    """
    Serializes samples into a snappy-compressed remote-write WriteRequest.
    """

    @log_execution_time(logger)
    def encode(self, samples: Sequence[SamplePoint]) -> bytes:
        """
        Raises:
            EncodingError: if serialization or compression fails
        """
        try:
            request = WriteRequest()
            grouped = group_series(samples)
            for labels, points in grouped.items():
                ts = request.timeseries.add()
                for name, value in labels:
                    ts.labels.add(name=name, value=value)
                for timestamp, value in points:
                    ts.samples.add(value=value, timestamp=timestamp)

            data = request.SerializeToString()
            compressed = snappy.compress(data)
        except (EncodeError, TypeError, ValueError) as e:
            raise EncodingError(f"Could not encode backfill payload: {e}") from e

        logger.info(
            "Encoded %d series (%d bytes, %d compressed)",
            len(grouped), len(data), len(compressed),
        )
        return compressed

    def decode(self, payload: bytes) -> Dict[SeriesKey, List[Tuple[int, float]]]:
        """
        Inverse of encode, returning label set -> [(timestamp_ms, value)].

        Raises:
            EncodingError: if the payload is not a compressed WriteRequest
        """
        try:
            request = WriteRequest()
            request.ParseFromString(snappy.decompress(payload))
        except (DecodeError, snappy.UncompressError) as e:
            raise EncodingError(f"Could not decode payload: {e}") from e

        result: Dict[SeriesKey, List[Tuple[int, float]]] = {}
        for ts in request.timeseries:
            key = tuple((label.name, label.value) for label in ts.labels)
            result[key] = [(s.timestamp, s.value) for s in ts.samples]
        return result
