import argparse
import json

from peektransit.core.time import local_now
from peektransit.schedule.config import load_normalizer_config
from peektransit.schedule.normalizer import normalize, normalize_mixed_format
from peektransit.schedule.rows import to_rows
from peektransit.schedule.types import TimeFormat
from peektransit.schedule.widgets import WIDGET_SIZES, widget_schedule
from peektransit.transit.client import TransitClient


def main(argv: list[str] | None = None, client: TransitClient | None = None) -> int:
    p = argparse.ArgumentParser(description="Print the normalized departure rows for a stop")
    p.add_argument("stop", type=int, help="Stop number (e.g. 10064)")
    p.add_argument("--format", dest="time_format", default="minutes", choices=["minutes", "clock", "mixed"])
    p.add_argument("--timezone", default=None, help="Zone used for 'now' (default: TRANSIT_TIMEZONE)")
    p.add_argument("--widget-size", default=None, choices=WIDGET_SIZES, help="Print only the rows a widget of this size shows")
    p.add_argument("--raw", action="store_true", help="Print the raw API payload instead of rows")

    args = p.parse_args(argv)

    config = load_normalizer_config()

    own_client = client is None
    client = client or TransitClient()
    try:
        now = local_now(args.timezone or client.cfg.timezone)
        raw = client.get_stop_schedule(args.stop, now)
    finally:
        if own_client:
            client.close()

    if args.raw:
        print(json.dumps(raw, indent=2))
        return 0

    if args.time_format == "mixed":
        entries = normalize_mixed_format(raw, now, config)
    else:
        entries = normalize(raw, now, TimeFormat(args.time_format), config)

    if args.widget_size:
        entries, _ = widget_schedule({args.stop: entries}, args.widget_size, config=config)

    for row in to_rows(entries, config):
        print(row)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
