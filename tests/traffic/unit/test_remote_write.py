import random
import pytest
from src.common.exceptions import EncodingError
from src.traffic.application.backfill import BackfillReconstructor
from src.traffic.domain.entities import ALL_COHORTS, Cohort, SamplePoint
from src.traffic.infrastructure.remote_write import (
    RemoteWriteEncoder, WriteRequest, group_series, series_labels,
)

@pytest.fixture
def encoder():
    return RemoteWriteEncoder()

@pytest.fixture
def samples(registry, noon):
    return BackfillReconstructor(registry, rng=random.Random(3)).reconstruct(noon)

def test_labels_sorted_by_name(noon):
    point = SamplePoint(noon, "road-1", Cohort("red", "Tesla"), 1.0, 2.0)
    labels = series_labels("cars_on_road", point)
    assert [name for name, _ in labels] == ["__name__", "color", "maker", "road"]
    assert dict(labels)["maker"] == "Tesla"

def test_one_series_per_road_cohort_metric(samples, registry):
    grouped = group_series(samples)

    assert len(grouped) == len(registry) * len(ALL_COHORTS) * 2
    for points in grouped.values():
        assert len(points) == 11
        timestamps = [ts for ts, _ in points]
        assert timestamps == sorted(timestamps)

def test_payload_carries_occupancy_and_totals(encoder, samples):
    decoded = encoder.decode(encoder.encode(samples))

    last = samples[-1]
    gauge = decoded[series_labels("cars_on_road", last)]
    counter = decoded[series_labels("road_traffic_total", last)]
    assert gauge[-1] == (last.timestamp_ms, last.occupancy)
    assert counter[-1] == (last.timestamp_ms, last.total)

    names = {dict(labels)["__name__"] for labels in decoded}
    assert names == {"cars_on_road", "road_traffic_total"}

def test_payload_is_snappy_compressed_write_request(encoder, samples):
    import snappy

    payload = encoder.encode(samples)
    request = WriteRequest()
    request.ParseFromString(snappy.decompress(payload))

    assert len(request.timeseries) == 100
    assert request.timeseries[0].labels[0].name == "__name__"

def test_empty_samples(encoder):
    assert encoder.decode(encoder.encode([])) == {}

def test_unencodable_value_raises(encoder, noon):
    bad = SamplePoint(noon, "road-1", ALL_COHORTS[0], "lots", 1.0)
    with pytest.raises(EncodingError):
        encoder.encode([bad])
