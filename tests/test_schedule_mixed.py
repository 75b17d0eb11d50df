from peektransit.schedule.config import NormalizerConfig
from peektransit.schedule.normalizer import normalize_mixed_format
from peektransit.schedule.types import ArrivalState


def rows(entries):
    return [(e.route_key, e.route_name, e.display_text) for e in entries]


def test_only_soonest_departure_per_variant_counts_down(now, make_stop, make_payload):
    raw = make_payload(
        make_stop("60", "Downtown", eta=3),
        make_stop("60", "Downtown", eta=7),
        make_stop("60", "Downtown", eta=10),
    )
    assert rows(normalize_mixed_format(raw, now)) == [
        ("60", "Downtown", "3 min."),
        ("60", "Downtown", "12:07 PM"),
        ("60", "Downtown", "12:10 PM"),
    ]


def test_soonest_is_picked_regardless_of_payload_order(now, make_stop, make_payload):
    raw = make_payload(
        make_stop("60", "Downtown", eta=10),
        make_stop("60", "Downtown", eta=3),
    )
    assert rows(normalize_mixed_format(raw, now)) == [
        ("60", "Downtown", "3 min."),
        ("60", "Downtown", "12:10 PM"),
    ]


def test_each_variant_gets_its_own_countdown(now, make_stop, make_payload):
    raw = make_payload(
        make_stop("60-1", "Downtown", eta=4),
        make_stop("60-2", "University", eta=6),
        make_stop("60-1", "Downtown", eta=8),
        make_stop("60-2", "University", eta=12),
    )
    assert rows(normalize_mixed_format(raw, now)) == [
        ("60", "Downtown", "4 min."),
        ("60", "University", "6 min."),
        ("60", "Downtown", "12:08 PM"),
        ("60", "University", "12:12 PM"),
    ]


def test_due_uses_up_the_countdown(now, make_stop, make_payload):
    raw = make_payload(make_stop("11", eta=0), make_stop("11", eta=5))
    assert [e.display_text for e in normalize_mixed_format(raw, now)] == ["Due", "12:05 PM"]


def test_every_due_departure_reads_due(now, make_stop, make_payload):
    raw = make_payload(make_stop("11", eta=0), make_stop("11", eta=-1))
    assert [e.display_text for e in normalize_mixed_format(raw, now)] == ["Due", "Due"]


def test_outside_window_stays_clock(now, make_stop, make_payload):
    raw = make_payload(make_stop("11", eta=20), make_stop("11", eta=40))
    assert [e.display_text for e in normalize_mixed_format(raw, now)] == ["12:20 PM", "12:40 PM"]


def test_window_is_configurable(now, make_stop, make_payload):
    raw = make_payload(make_stop("11", eta=20))
    cfg = NormalizerConfig(next_bus_window_minutes=25)
    assert [e.display_text for e in normalize_mixed_format(raw, now, cfg)] == ["20 min."]


def test_ties_break_on_numeric_route_key(now, make_stop, make_payload):
    raw = make_payload(make_stop("11", eta=5), make_stop("2", eta=5))
    assert [e.route_key for e in normalize_mixed_format(raw, now)] == ["2", "11"]


def test_ties_break_lexicographically_for_mixed_keys(now, make_stop, make_payload):
    raw = make_payload(make_stop("BLUE", eta=5), make_stop("11", eta=5), make_stop("FX3", eta=5))
    assert [e.route_key for e in normalize_mixed_format(raw, now)] == ["11", "B", "FX3"]


def test_cancelled_sort_last(now, make_stop, make_payload):
    raw = make_payload(
        make_stop("11", eta=1, cancelled=True),
        make_stop("16", eta=50),
        make_stop("18", eta=0),
    )
    out = normalize_mixed_format(raw, now)
    assert [(e.route_key, e.state, e.display_text) for e in out] == [
        ("18", ArrivalState.OK, "Due"),
        ("16", ArrivalState.OK, "12:50 PM"),
        ("11", ArrivalState.CANCELLED, ""),
    ]


def test_cancelled_does_not_use_up_the_countdown(now, make_stop, make_payload):
    raw = make_payload(make_stop("11", eta=2, cancelled=True), make_stop("11", eta=6))
    assert [e.display_text for e in normalize_mixed_format(raw, now)] == ["6 min.", ""]


def test_late_is_reported_on_the_countdown_only(now, make_stop, make_payload):
    raw = make_payload(make_stop("11", eta=4, delay=2), make_stop("11", eta=9, delay=2))
    out = normalize_mixed_format(raw, now)
    assert [(e.state, e.display_text) for e in out] == [
        (ArrivalState.LATE, "4 min."),
        (ArrivalState.OK, "12:09 PM"),
    ]


def test_old_departures_are_dropped(now, make_stop, make_payload):
    raw = make_payload(make_stop("11", eta=-3), make_stop("11", eta=3))
    assert [e.display_text for e in normalize_mixed_format(raw, now)] == ["3 min."]


def test_malformed_payload_is_empty(now):
    assert normalize_mixed_format({"stop-schedule": {"route-schedules": "nope"}}, now) == []


def test_mixed_is_deterministic(now, make_stop, make_payload):
    raw = make_payload(
        make_stop("11", eta=0),
        make_stop("11", eta=4),
        make_stop("BLUE-1", eta=4),
        make_stop("16", eta=30, cancelled=True),
    )
    assert normalize_mixed_format(raw, now) == normalize_mixed_format(raw, now)
