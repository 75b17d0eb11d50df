"""
Flattened row format shared with widget/preview consumers:

    "{route_key}{SEP}{route_name}{SEP}{state label}{SEP}{display text}"

with SEP = " ---- " unless configured otherwise.
"""

from __future__ import annotations

from typing import Iterable

from .config import DEFAULT_CONFIG, NormalizerConfig
from .types import ArrivalEntry


def to_row(entry: ArrivalEntry, config: NormalizerConfig = DEFAULT_CONFIG) -> str:
    return config.separator.join(
        (entry.route_key, entry.route_name, config.state_label(entry.state), entry.display_text)
    )


def to_rows(entries: Iterable[ArrivalEntry], config: NormalizerConfig = DEFAULT_CONFIG) -> list[str]:
    return [to_row(e, config) for e in entries]


def parse_row(row: str, config: NormalizerConfig = DEFAULT_CONFIG) -> ArrivalEntry:
    """
    Raises:
        ValueError: if the row does not have four fields or the state label is unknown.
    """
    # Route names may contain the separator; the other three fields never do
    sep = config.separator
    head = row.split(sep, 1)
    tail = head[1].rsplit(sep, 2) if len(head) == 2 else []
    if len(tail) != 3:
        raise ValueError(f"expected 4 fields separated by {sep!r}: {row!r}")

    route_key = head[0]
    route_name, state_label, display_text = tail
    return ArrivalEntry(
        route_key=route_key,
        route_name=route_name,
        state=config.state_for_label(state_label),
        display_text=display_text,
    )
