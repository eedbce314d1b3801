#!/usr/bin/env python3
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import re

_DATE_RE = re.compile(r"^\s*(\d{4})-(\d{1,2})-(\d{1,2})")
_TIME_RE = re.compile(r"^(\d{1,2}:\d{2})(?:-(\d{1,2}:\d{2}))?$")
_REPEATER_RE = re.compile(r"^(?:\.\+|\+\+|\+)\d+[hdwmy]$")
_DELAY_RE = re.compile(r"^(?:--|-)\d+[hdwmy]$")
_WEEKDAY_RE = re.compile(r"^[^\W\d_]+\.?$")


@dataclass
class OrgTimestamp:
    """
    Structured value of an Org timestamp body.

    Example:
        '2022-12-22 Thu 11:00-12:30 +1w'
    ->  year=2022, month=12, day=22, weekday='Thu',
        start_time='11:00', end_time='12:30', repeater='+1w'
    """
    raw: str
    year: Optional[int] = None
    month: Optional[int] = None
    day: Optional[int] = None
    weekday: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    repeater: Optional[str] = None
    delay: Optional[str] = None

    @property
    def date(self) -> Optional[str]:
        if self.year is None or self.month is None or self.day is None:
            return None
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    @property
    def is_range(self) -> bool:
        return self.end_time is not None


def _normalize_time(value: str) -> str:
    hours, minutes = value.split(":", 1)
    return f"{int(hours):02d}:{minutes}"


def match_timestamp(raw: str) -> OrgTimestamp:
    """
    Parse the body of an Org timestamp (the text between '<' and '>').

    Never raises: parts that cannot be recognized are left as None,
    unknown trailing tokens are ignored.
    """
    ts = OrgTimestamp(raw=raw)

    match = _DATE_RE.match(raw)
    if not match:
        return ts

    ts.year, ts.month, ts.day = (int(g) for g in match.groups())

    for token in raw[match.end():].split():
        time_match = _TIME_RE.match(token)
        if time_match and ts.start_time is None:
            ts.start_time = _normalize_time(time_match.group(1))
            if time_match.group(2):
                ts.end_time = _normalize_time(time_match.group(2))
        elif _REPEATER_RE.match(token) and ts.repeater is None:
            ts.repeater = token
        elif _DELAY_RE.match(token) and ts.delay is None:
            ts.delay = token
        elif _WEEKDAY_RE.match(token) and ts.weekday is None:
            ts.weekday = token.rstrip(".")
        # anything else: ignored

    return ts
