from datetime import datetime
from typing import Optional

import pytz

WINNIPEG = pytz.timezone("America/Winnipeg")


def local_now(tz_name: Optional[str] = None, *, utc_now: Optional[datetime] = None) -> datetime:
    """
    Current wall-clock time in the transit agency's zone, as a naive datetime.
    The schedule API speaks naive local timestamps, so "now" has to match them.
    """
    tz = pytz.timezone(tz_name) if tz_name else WINNIPEG
    if utc_now is None:
        utc_now = datetime.now(pytz.utc)
    elif utc_now.tzinfo is None:
        utc_now = pytz.utc.localize(utc_now)
    return utc_now.astimezone(tz).replace(tzinfo=None)
