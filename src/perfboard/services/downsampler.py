"""
Downsampling and gap filling for display series.

Raw samples are grouped by UTC calendar day. Every day between the first and
last sampled day is represented in the output; days with no sample get one
synthetic point at 16:00 UTC carrying the previous day's last value.
"""

import math
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

from perfboard.core.timezone import day_anchor, day_key, iter_days, to_utc
from perfboard.domain.models import Bar, DownsampledPoint, EquityPoint

Sample = tuple[datetime, float]

AFTERNOON_HOURS = (14, 16)
EVENING_HOURS = (19, 23)


def as_samples(points: Iterable[Union[EquityPoint, Bar]]) -> list[Sample]:
    """Convert EquityPoints or Bars into (utc time, value) pairs sorted by time."""
    samples = []
    for p in points:
        value = p.equity if isinstance(p, EquityPoint) else p.close
        samples.append((to_utc(p.time), float(value)))
    samples.sort(key=lambda s: s[0])
    return samples


def filter_trustworthy(points: list[EquityPoint], floor: float = 1000.0) -> list[EquityPoint]:
    """Drop equity samples at or below `floor`; they come from corrupt or zeroed snapshots."""
    return [p for p in points if p.equity > floor]


def extend_to_now(
    points: list[EquityPoint],
    current_value: Optional[float],
    now: datetime,
    threshold_hours: int = 6,
    cap_hours: int = 72,
    floor: float = 1000.0,
) -> list[EquityPoint]:
    """
    Close a stale tail by interpolating toward the current account value.

    Applies only when the last point is older than `threshold_hours` and
    `current_value` is above `floor`. Hourly points are linearly interpolated
    from the last value, at most `cap_hours` of them, then a final point at
    `now` carries `current_value`. With no points the gap starts 24 h back.
    """
    now = to_utc(now)
    if current_value is None or current_value <= floor:
        return list(points)

    last_time = to_utc(points[-1].time) if points else None
    if last_time is not None and now - last_time <= timedelta(hours=threshold_hours):
        return list(points)

    gap_start = last_time or (now - timedelta(hours=24))
    last_value = points[-1].equity if points else current_value
    span = (now - gap_start).total_seconds()
    hours_in_gap = math.ceil(span / 3600)

    extended = list(points)
    for i in range(1, min(hours_in_gap, cap_hours) + 1):
        stamp = gap_start + timedelta(hours=i)
        if stamp >= now:
            break
        progress = (stamp - gap_start).total_seconds() / span
        extended.append(EquityPoint(time=stamp, equity=last_value + (current_value - last_value) * progress))
    extended.append(EquityPoint(time=now, equity=current_value))
    return extended


def _group_by_day(samples: list[Sample]) -> dict[date, list[Sample]]:
    grouped: dict[date, list[Sample]] = defaultdict(list)
    for sample in samples:
        grouped[day_key(sample[0])].append(sample)
    return grouped


def _in_window(moment: datetime, window: tuple[int, int]) -> bool:
    return window[0] <= moment.hour <= window[1]


def _pick_two(day_samples: list[Sample]) -> list[Sample]:
    if len(day_samples) <= 2:
        return list(day_samples)

    afternoon = next(
        (s for s in day_samples if _in_window(s[0], AFTERNOON_HOURS)),
        day_samples[len(day_samples) // 2],
    )
    evening = next(
        (s for s in reversed(day_samples) if _in_window(s[0], EVENING_HOURS)),
        day_samples[-1],
    )
    if afternoon[0] == evening[0]:
        return [afternoon]
    return sorted([afternoon, evening], key=lambda s: s[0])


def _downsample(samples: list[Sample], per_day: int) -> list[DownsampledPoint]:
    if not samples:
        return []
    grouped = _group_by_day(samples)
    days = sorted(grouped)

    result: list[DownsampledPoint] = []
    last_value: Optional[float] = None
    for day in iter_days(days[0], days[-1]):
        day_samples = grouped.get(day)
        if day_samples:
            chosen = [day_samples[-1]] if per_day == 1 else _pick_two(day_samples)
            result.extend(DownsampledPoint(day_key=day, time=t, value=v) for t, v in chosen)
            last_value = day_samples[-1][1]
        else:
            result.append(
                DownsampledPoint(day_key=day, time=day_anchor(day), value=last_value, synthetic=True)
            )
    return result


def one_point_per_day(points: Iterable[Union[EquityPoint, Bar]]) -> list[DownsampledPoint]:
    """Last sample of each day; missing days carry the previous value flat."""
    return _downsample(as_samples(points), per_day=1)


def two_points_per_day(points: Iterable[Union[EquityPoint, Bar]]) -> list[DownsampledPoint]:
    """
    Up to two samples per day.

    Days with more than two samples keep the first one in the afternoon window
    (14:00-16:59 UTC) and the last one in the evening window (19:00-23:59 UTC),
    falling back to the middle and last samples respectively.
    """
    return _downsample(as_samples(points), per_day=2)
