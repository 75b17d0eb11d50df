from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence

from .config import DEFAULT_CONFIG, NormalizerConfig
from .types import ArrivalEntry, ArrivalState

WIDGET_SIZES = ("small", "medium", "large", "lockscreen")

_MAX_STOPS = {"large": 3, "medium": 2, "small": 1, "lockscreen": 2}
_MAX_VARIANTS = {"large": 2, "medium": 2, "small": 2, "lockscreen": 1}


@dataclass(frozen=True)
class VariantRef:
    key: str
    name: str


def variant_of(entry: ArrivalEntry) -> VariantRef:
    return VariantRef(key=entry.route_key, name=entry.route_name)


def max_stops_for_size(size: Optional[str]) -> int:
    return _MAX_STOPS.get((size or "").lower(), 1)


def max_variants_for_size(size: Optional[str]) -> int:
    return _MAX_VARIANTS.get((size or "").lower(), 1)


def auto_select_variants(entries: Iterable[ArrivalEntry], size: Optional[str]) -> list[VariantRef]:
    """
    Pick variants for a widget with nothing selected: the first distinct
    variants in schedule order, at least two.
    """
    limit = max(2, max_variants_for_size(size) * max_stops_for_size(size))
    picked: list[VariantRef] = []
    for entry in entries:
        ref = variant_of(entry)
        if ref in picked:
            continue
        picked.append(ref)
        if len(picked) >= limit:
            break
    return picked


def rows_for_selected_variants(
    entries: Sequence[ArrivalEntry],
    selected: Iterable[VariantRef],
) -> list[ArrivalEntry]:
    """First (best ranked) entry for each selected variant that has one."""
    out: list[ArrivalEntry] = []
    seen: set[VariantRef] = set()
    for ref in selected:
        if ref in seen:
            continue
        seen.add(ref)
        match = next((e for e in entries if variant_of(e) == ref), None)
        if match is not None:
            out.append(match)
    return out


def fill_missing_variants(
    entries: Sequence[ArrivalEntry],
    selected: Iterable[VariantRef],
    config: NormalizerConfig = DEFAULT_CONFIG,
) -> list[ArrivalEntry]:
    """
    Append an "Nhrs+" placeholder for every selected variant with no entry,
    N being the schedule window the API was queried with.
    """
    available = {variant_of(e) for e in entries}
    out = list(entries)
    for ref in selected:
        if ref in available:
            continue
        available.add(ref)
        out.append(
            ArrivalEntry(
                route_key=ref.key,
                route_name=ref.name,
                state=ArrivalState.OK,
                display_text=f"{config.schedule_window_hours}hrs+",
            )
        )
    return out


def widget_schedule(
    schedules_by_stop: Mapping[int, Sequence[ArrivalEntry]],
    size: Optional[str],
    selected_by_stop: Optional[Mapping[int, Sequence[VariantRef]]] = None,
    config: NormalizerConfig = DEFAULT_CONFIG,
) -> tuple[list[ArrivalEntry], dict[int, list[VariantRef]]]:
    """
    Build the rows a widget shows for its stops.

    Stops without a selection (or every stop, when selected_by_stop is None)
    get auto-selected variants. Returns the rows plus the selection used per stop.
    """
    rows: list[ArrivalEntry] = []
    selection: dict[int, list[VariantRef]] = {}

    for stop_number, entries in schedules_by_stop.items():
        chosen = list((selected_by_stop or {}).get(stop_number) or [])
        if not chosen:
            chosen = auto_select_variants(entries, size)
        selection[stop_number] = chosen

        picked = rows_for_selected_variants(entries, chosen)
        rows.extend(fill_missing_variants(picked, chosen, config))

    return rows, selection
