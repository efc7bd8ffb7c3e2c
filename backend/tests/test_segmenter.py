import pytest

from flights.config import SegmentationConfig
from flights.errors import NoTraceData, OutOfOrderTimestamp
from flights.models import TracePoint
from flights.segmenter import Phase, classify, legs, segment


def ground(t0, t1, lat, lon, step=60, altitude=0.0):
    return [TracePoint(t, lat, lon, altitude) for t in range(t0, t1 + 1, step)]


def cruise(t0, t1, start, end, step=60, altitude=30000.0):
    n = (t1 - t0) // step
    points = []
    for i in range(n + 1):
        f = i / n if n else 0.0
        points.append(
            TracePoint(
                t0 + i * step,
                start[0] + f * (end[0] - start[0]),
                start[1] + f * (end[1] - start[1]),
                altitude,
            )
        )
    return points


def replace(points, timestamp, point):
    return [point if p.timestamp == timestamp else p for p in points]


@pytest.fixture
def one_flight():
    # on the ground at Copenhagen until t=600, airborne, down at t=4200
    return (
        ground(0, 540, 55.0, 12.0)
        + [TracePoint(600, 55.0, 12.0, 500.0)]
        + cruise(660, 4140, (55.0, 12.0), (56.0, 10.0))
        + [TracePoint(4200, 56.0, 10.0, 800.0)]
        + ground(4260, 6000, 56.0, 10.0)
    )


@pytest.fixture
def two_flights():
    return (
        ground(0, 600, 55.0, 12.0)
        + cruise(660, 1800, (55.0, 12.0), (55.5, 11.0))
        + ground(1860, 3000, 55.5, 11.0)
        + cruise(3060, 4140, (55.5, 11.0), (56.0, 10.0))
        + ground(4200, 6000, 56.0, 10.0)
    )


def test_classify():
    config = SegmentationConfig()
    assert classify(TracePoint(0, 55.0, 12.0, 0.0), config) is Phase.GROUND
    assert classify(TracePoint(0, 55.0, 12.0, 999.0), config) is Phase.GROUND
    assert classify(TracePoint(0, 55.0, 12.0, 1000.0), config) is Phase.AIRBORNE
    assert classify(TracePoint(0, 55.0, 12.0, None, on_ground=True), config) is Phase.GROUND
    # reported flag is enough to be on the ground
    assert classify(TracePoint(0, 55.0, 12.0, 35000.0, on_ground=True), config) is Phase.GROUND
    # a low altitude wins over a reported airborne flag
    assert classify(TracePoint(0, 55.0, 12.0, 500.0, on_ground=False), config) is Phase.GROUND


def test_classify_unusable():
    config = SegmentationConfig()
    assert classify(TracePoint(0, None, None, 30000.0), config) is None
    assert classify(TracePoint(0, 55.0, None, 30000.0), config) is None
    assert classify(TracePoint(0, 55.0, 12.0, None), config) is None
    assert classify(TracePoint(0, 55.0, 12.0, None, on_ground=False), config) is None


def test_classify_threshold_is_configurable():
    config = SegmentationConfig(ground_altitude_ft=500.0)
    assert classify(TracePoint(0, 55.0, 12.0, 600.0), config) is Phase.AIRBORNE


def test_one_flight(one_flight):
    found = legs(one_flight)

    assert len(found) == 1
    leg = found[0]
    assert leg.start.timestamp == 600
    assert leg.start.position == (55.0, 12.0)
    assert leg.end.timestamp == 4200
    assert leg.end.position == (56.0, 10.0)
    assert leg.duration == 3600
    assert leg.distance_km == pytest.approx(168.0, abs=0.5)


def test_all_ground():
    points = ground(0, 49 * 60, 55.0, 12.0)
    assert len(points) == 50
    assert legs(points) == []


def test_all_ground_by_flag():
    points = [TracePoint(t, 55.0, 12.0, None, on_ground=True) for t in range(0, 3000, 60)]
    assert legs(points) == []


def test_single_sample_dip_is_absorbed(one_flight):
    dip = TracePoint(2400, 55.5, 11.0, 950.0)
    points = replace(one_flight, 2400, dip)

    assert legs(points) == legs(one_flight)


def test_short_dip_is_absorbed(one_flight):
    points = replace(one_flight, 2400, TracePoint(2400, 55.5, 11.0, 0.0))
    points = replace(points, 2460, TracePoint(2460, 55.5, 11.0, 0.0))
    points = replace(points, 2520, TracePoint(2520, 55.5, 11.0, 0.0))

    found = legs(points)
    assert len(found) == 1
    assert found[0].start.timestamp == 600
    assert found[0].end.timestamp == 4200


def test_long_ground_stop_splits(two_flights):
    found = legs(two_flights)

    assert len(found) == 2
    first, second = found
    assert first.start.timestamp == 600
    assert first.end.timestamp == 1860
    assert first.end.position == (55.5, 11.0)
    assert second.start.timestamp == 3000
    assert second.start.position == (55.5, 11.0)
    assert second.end.timestamp == 4200
    assert second.end.position == (56.0, 10.0)


def test_ground_stop_threshold_is_configurable(two_flights):
    config = SegmentationConfig(min_ground_duration_s=3600)
    found = legs(two_flights, config)

    assert len(found) == 1
    assert found[0].start.timestamp == 600
    assert found[0].end.timestamp == 4200


def test_legs_are_ordered_and_disjoint(two_flights):
    found = legs(two_flights)

    for leg in found:
        assert leg.duration > 0
    for previous, current in zip(found, found[1:]):
        assert previous.start.timestamp <= current.start.timestamp
        assert previous.end.timestamp <= current.start.timestamp


def test_segmentation_is_idempotent(two_flights):
    assert legs(two_flights) == legs(two_flights)


def test_trace_starting_in_the_air():
    points = cruise(0, 3000, (55.0, 12.0), (56.0, 10.0)) + ground(3060, 4000, 56.0, 10.0)
    found = legs(points)

    assert len(found) == 1
    assert found[0].start.timestamp == 0
    assert found[0].end.timestamp == 3060


def test_trace_ending_in_the_air():
    points = ground(0, 600, 55.0, 12.0) + cruise(660, 3000, (55.0, 12.0), (56.0, 10.0))
    found = legs(points)

    assert len(found) == 1
    assert found[0].start.timestamp == 600
    assert found[0].end.timestamp == 3000
    assert found[0].end.position == pytest.approx((56.0, 10.0))


def test_short_airborne_glitch_is_discarded():
    points = replace(ground(0, 1200, 55.0, 12.0), 600, TracePoint(600, 55.0, 12.0, 2000.0))
    assert legs(points) == []


def test_minimum_distance():
    points = (
        ground(0, 600, 55.0, 12.0)
        + cruise(660, 3000, (55.0, 12.0), (55.01, 12.0))
        + ground(3060, 4000, 55.01, 12.0)
    )
    assert len(legs(points)) == 1
    assert legs(points, SegmentationConfig(min_leg_distance_km=5.0)) == []


def test_unusable_points_are_skipped(one_flight):
    points = replace(one_flight, 2400, TracePoint(2400, None, None, 30000.0))
    points = replace(points, 2460, TracePoint(2460, 55.5, 11.0, None))

    assert legs(points) == legs(one_flight)


def test_empty_trace():
    with pytest.raises(NoTraceData):
        legs([])


def test_unusable_trace():
    points = [TracePoint(t, None, None, None) for t in range(0, 600, 60)]
    with pytest.raises(NoTraceData):
        legs(points)


def test_out_of_order_is_truncated(one_flight):
    head = [p for p in one_flight if p.timestamp <= 2400]
    points = head + [TracePoint(100, 56.0, 10.0, 0.0)] + ground(4200, 6000, 56.0, 10.0)
    found = legs(points)

    # the trace is only trusted until the violation, still airborne by then
    assert len(found) == 1
    assert found[0].start.timestamp == 600
    assert found[0].end.timestamp == 2400


def test_out_of_order_strict(one_flight):
    points = list(one_flight)
    points[10], points[11] = points[11], points[10]

    with pytest.raises(OutOfOrderTimestamp) as excinfo:
        legs(points, strict=True)
    assert excinfo.value.index == 11


def test_segment_is_lazy(two_flights):
    it = segment(iter(two_flights))
    first = next(it)
    assert first.start.timestamp == 600
    assert [leg.start.timestamp for leg in it] == [3000]


def test_parked_aircraft_with_repeated_glitches():
    # a bad altitude every 4 minutes, each one within a dip of the previous one
    points = [
        TracePoint(t, 55.0, 12.0, 5000.0 if t % 240 == 60 else 0.0)
        for t in range(0, 6000, 60)
    ]
    assert len(points) == 100
    assert legs(points) == []


def test_glitches_do_not_extend_a_flight(one_flight):
    parked = [
        TracePoint(t, 56.0, 10.0, 5000.0 if t % 240 == 0 else 0.0)
        for t in range(6060, 9000, 60)
    ]
    found = legs(one_flight + parked)

    assert len(found) == 1
    assert found[0].start.timestamp == 600
    assert found[0].end.timestamp == 4200
