from peektransit.schedule.config import NormalizerConfig
from peektransit.schedule.rows import to_rows
from peektransit.schedule.types import ArrivalEntry, ArrivalState
from peektransit.schedule.widgets import (
    VariantRef,
    auto_select_variants,
    fill_missing_variants,
    max_stops_for_size,
    max_variants_for_size,
    rows_for_selected_variants,
    widget_schedule,
)


def entry(key, name, text="5 min."):
    return ArrivalEntry(key, name, ArrivalState.OK, text)


SCHEDULE = [
    entry("11", "Polo Park", "Due"),
    entry("B", "Downtown", "3 min."),
    entry("11", "Polo Park", "8 min."),
    entry("16", "Selkirk", "12:40 PM"),
    entry("18", "North Main", "1:05 PM"),
    entry("24", "Ness", "1:20 PM"),
]


def test_size_limits():
    assert [max_stops_for_size(s) for s in ("large", "medium", "small", "lockscreen", "huge", None)] == [3, 2, 1, 2, 1, 1]
    assert [max_variants_for_size(s) for s in ("large", "medium", "small", "lockscreen", "huge", None)] == [2, 2, 2, 1, 1, 1]


def test_auto_select_takes_distinct_variants_in_order():
    assert auto_select_variants(SCHEDULE, "medium") == [
        VariantRef("11", "Polo Park"),
        VariantRef("B", "Downtown"),
        VariantRef("16", "Selkirk"),
        VariantRef("18", "North Main"),
    ]


def test_auto_select_takes_at_least_two():
    assert len(auto_select_variants(SCHEDULE, "small")) == 2
    assert len(auto_select_variants(SCHEDULE, None)) == 2


def test_rows_for_selected_variants_take_first_match():
    selected = [VariantRef("11", "Polo Park"), VariantRef("16", "Selkirk"), VariantRef("99", "Nowhere")]
    assert rows_for_selected_variants(SCHEDULE, selected) == [SCHEDULE[0], SCHEDULE[3]]


def test_fill_missing_variants_appends_placeholder():
    selected = [VariantRef("16", "Selkirk"), VariantRef("99", "Nowhere")]
    filled = fill_missing_variants([SCHEDULE[3]], selected)
    assert filled[-1] == ArrivalEntry("99", "Nowhere", ArrivalState.OK, "6hrs+")
    assert to_rows(filled)[-1] == "99 ---- Nowhere ---- Ok ---- 6hrs+"


def test_fill_missing_uses_configured_window():
    filled = fill_missing_variants([], [VariantRef("99", "Nowhere")], NormalizerConfig(schedule_window_hours=3))
    assert filled[0].display_text == "3hrs+"


def test_widget_schedule_mixes_selected_and_auto():
    schedules = {
        10064: SCHEDULE,
        10625: [entry("72", "Killarney", "9 min.")],
    }
    rows, selection = widget_schedule(
        schedules,
        "small",
        selected_by_stop={10064: [VariantRef("B", "Downtown"), VariantRef("60", "Pembina")]},
    )
    assert selection[10625] == [VariantRef("72", "Killarney")]
    assert [(r.route_key, r.display_text) for r in rows] == [
        ("B", "3 min."),
        ("60", "6hrs+"),
        ("72", "9 min."),
    ]
