"""근무시간 계산 엔진 — 주간/야간 근무 분 계산 및 휴게시간 보정.

Work-time engine — regular/night minute computation and the statutory
minimum-break top-up.

Everything in this module is pure: no clock reads, no database access.
Breaks and shifts are tagged variants so an illegal state (two open breaks,
a closed shift with an open break) cannot be built.

    OpenBreak(start)            ClosedBreak(start, end)
    OpenShift(check_in, ...)    ClosedShift(check_in, check_out, breaks)
"""

from dataclasses import dataclass, field
from datetime import datetime, time, timedelta, timezone
from enum import Enum
from typing import Any, Iterable
from zoneinfo import ZoneInfo

from app.utils.exceptions import AlreadyOnBreakError, NotOnBreakError, ValidationError

ONE_MINUTE: timedelta = timedelta(minutes=1)

# 야간 근로 시간대 22:00~05:00 — Local window counted as night work
NIGHT_START: time = time(22, 0)
NIGHT_END: time = time(5, 0)

# 근로기준법 제54조 — 8시간 근로 시 1시간 이상 휴게
# Labor Standards Act art. 54: 8h of work requires at least 60 minutes of break
MIN_BREAK_WORK_THRESHOLD: int = 8 * 60
MIN_BREAK_MINUTES: int = 60

DEFAULT_TZ: ZoneInfo = ZoneInfo("Asia/Seoul")


class ShiftState(str, Enum):
    """근무 상태 — Lifecycle state of an employee's session at a branch."""

    NONE = "none"
    OPEN = "open"
    ON_BREAK = "on_break"
    CLOSED = "closed"


def as_utc(value: datetime) -> datetime:
    """DB에서 읽은 시각을 UTC aware로 변환합니다.

    Naive values are stored UTC (SQLite drops tzinfo on round trip).
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def localize(value: datetime, tz: ZoneInfo) -> datetime:
    """입력 시각을 aware로 변환합니다 — naive 값은 매장 현지 시각으로 간주.

    Naive input is wall-clock time in the store zone; aware input is kept.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value


@dataclass(frozen=True)
class OpenBreak:
    """진행 중인 휴게 — A break that has started but not ended."""

    start: datetime

    end = None


@dataclass(frozen=True)
class ClosedBreak:
    """종료된 휴게 — A finished break, end > start."""

    start: datetime
    end: datetime

    @property
    def minutes(self) -> int:
        return (self.end - self.start) // ONE_MINUTE


Break = OpenBreak | ClosedBreak


@dataclass(frozen=True)
class WorkMinutes:
    """근무 분 계산 결과 — regular + night == total."""

    regular: int = 0
    night: int = 0

    @property
    def total(self) -> int:
        return self.regular + self.night

    def as_fields(self) -> dict[str, int]:
        # ShiftRecord 컬럼명으로 변환 — Column names of the derived fields
        return {
            "regular_minutes": self.regular,
            "night_minutes": self.night,
            "total_minutes": self.total,
        }


def _grid_index(instant: datetime, origin: datetime, limit: int) -> int:
    # origin 기준 분 격자에서 instant 이후 첫 칸 — first grid minute at or after instant
    steps = -((origin - instant) // ONE_MINUTE)
    return min(max(steps, 0), limit)


def _merge(ranges: Iterable[tuple[int, int]]) -> list[tuple[int, int]]:
    merged: list[tuple[int, int]] = []
    for start, stop in sorted(r for r in ranges if r[0] < r[1]):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], stop))
        else:
            merged.append((start, stop))
    return merged


def _overlap(left: list[tuple[int, int]], right: list[tuple[int, int]]) -> int:
    return sum(
        max(0, min(a_stop, b_stop) - max(a_start, b_start))
        for a_start, a_stop in left
        for b_start, b_stop in right
    )


def _night_windows(start: datetime, end: datetime, tz: ZoneInfo) -> Iterable[tuple[datetime, datetime]]:
    # 현지 날짜별 22:00~익일 05:00 — one window per local day, starting the day before
    day = start.astimezone(tz).date() - timedelta(days=1)
    last = end.astimezone(tz).date()
    while day <= last:
        opens = datetime.combine(day, NIGHT_START, tzinfo=tz)
        closes = datetime.combine(day + timedelta(days=1), NIGHT_END, tzinfo=tz)
        yield opens.astimezone(timezone.utc), closes.astimezone(timezone.utc)
        day += timedelta(days=1)


def compute_work_minutes(
    check_in: datetime | None,
    check_out: datetime | None,
    breaks: Iterable[Break],
    tz: ZoneInfo = DEFAULT_TZ,
) -> WorkMinutes:
    """출퇴근 시각과 휴게 목록으로 주간/야간 근무 분을 계산합니다.

    Counts the minutes of the grid anchored at check_in: minute k starts at
    check_in + k and is counted only when it fits entirely before check_out,
    so with no breaks the total is floor(elapsed / 1 minute). Minutes starting
    inside a closed break (start <= minute < end) are skipped; open breaks
    cover nothing. Remaining minutes are night when their local hour in
    ``tz`` is 22:00–04:59.

    Breaks and night windows are turned into index ranges on that grid, so
    the cost grows with the number of local days, not minutes.

    Args:
        check_in: 출근 시각 (Check-in instant; naive = local wall clock in tz)
        check_out: 퇴근 시각, 근무 중이면 None (Check-out instant or None)
        breaks: 휴게 목록 (Break intervals)
        tz: 야간 판정 타임존 (Zone whose local hour decides night work)

    Returns:
        WorkMinutes: 주간/야간/총 근무 분 (All zero when the shift is not closeable)
    """
    if not isinstance(check_in, datetime) or not isinstance(check_out, datetime):
        return WorkMinutes()

    # 절대시간(UTC) 기준 — aware 시각 + timedelta는 벽시계 연산이므로 UTC로 변환
    origin = localize(check_in, tz).astimezone(timezone.utc)
    end = localize(check_out, tz).astimezone(timezone.utc)
    limit = (end - origin) // ONE_MINUTE
    if limit <= 0:
        return WorkMinutes()

    def index(instant: datetime) -> int:
        return _grid_index(localize(instant, tz), origin, limit)

    rests = _merge((index(b.start), index(b.end)) for b in breaks if isinstance(b, ClosedBreak))
    nights = _merge((index(opens), index(closes)) for opens, closes in _night_windows(origin, end, tz))

    total = limit - sum(stop - start for start, stop in rests)
    night = sum(stop - start for start, stop in nights) - _overlap(nights, rests)
    return WorkMinutes(regular=total - night, night=night)


def apply_minimum_break(
    check_in: datetime,
    check_out: datetime,
    breaks: list[ClosedBreak],
) -> tuple[datetime, list[ClosedBreak]]:
    """8시간 이상 근무 시 휴게 1시간을 보장하도록 퇴근 시각을 연장합니다.

    Minimum-break top-up. When worked minutes (elapsed minus breaks) reach 480
    and recorded breaks total under 60 minutes, the check-out is pushed forward
    by the shortfall and a synthetic break covering exactly the pushed span is
    appended. Worked time is unchanged; only the recorded boundary moves.

    Returns:
        tuple: (퇴근 시각, 휴게 목록) — possibly extended check-out and breaks
    """
    break_minutes = sum(b.minutes for b in breaks)
    elapsed_minutes = (check_out - check_in) // ONE_MINUTE
    work_minutes = elapsed_minutes - break_minutes

    if work_minutes >= MIN_BREAK_WORK_THRESHOLD and break_minutes < MIN_BREAK_MINUTES:
        shortfall = MIN_BREAK_MINUTES - break_minutes
        extended = check_out + timedelta(minutes=shortfall)
        return extended, [*breaks, ClosedBreak(start=check_out, end=extended)]

    return check_out, list(breaks)


@dataclass(frozen=True)
class ClosedShift:
    """퇴근 완료된 근무 — Closed session; every break is closed."""

    check_in: datetime
    check_out: datetime
    breaks: tuple[ClosedBreak, ...] = ()

    state = ShiftState.CLOSED

    def work_minutes(self, tz: ZoneInfo = DEFAULT_TZ) -> WorkMinutes:
        return compute_work_minutes(self.check_in, self.check_out, self.breaks, tz)

    def with_minimum_break(self) -> "ClosedShift":
        check_out, breaks = apply_minimum_break(self.check_in, self.check_out, list(self.breaks))
        return ClosedShift(check_in=self.check_in, check_out=check_out, breaks=tuple(breaks))


@dataclass(frozen=True)
class OpenShift:
    """근무 중인 세션 — Open session with at most one open break.

    ``closed_breaks`` keep insertion order; the open break, if any, is always
    the most recently created one.
    """

    check_in: datetime
    closed_breaks: tuple[ClosedBreak, ...] = ()
    open_break: OpenBreak | None = None

    @property
    def state(self) -> ShiftState:
        return ShiftState.ON_BREAK if self.open_break is not None else ShiftState.OPEN

    @property
    def breaks(self) -> tuple[Break, ...]:
        if self.open_break is None:
            return self.closed_breaks
        return (*self.closed_breaks, self.open_break)

    def start_break(self, now: datetime) -> "OpenShift":
        if self.open_break is not None:
            raise AlreadyOnBreakError()
        return OpenShift(self.check_in, self.closed_breaks, OpenBreak(start=now))

    def end_break(self, now: datetime) -> "OpenShift":
        if self.open_break is None:
            raise NotOnBreakError()
        closed = ClosedBreak(start=self.open_break.start, end=now)
        return OpenShift(self.check_in, (*self.closed_breaks, closed), None)

    def close(self, now: datetime) -> ClosedShift:
        """퇴근 처리 — close any open break at ``now``, then apply the top-up."""
        closed_breaks = self.closed_breaks
        if self.open_break is not None:
            closed_breaks = (*closed_breaks, ClosedBreak(start=self.open_break.start, end=now))
        return ClosedShift(self.check_in, now, closed_breaks).with_minimum_break()


Shift = OpenShift | ClosedShift


def build_shift(check_in: datetime, check_out: datetime | None, breaks: Iterable[Break]) -> Shift:
    """저장된 필드로 근무 variant를 구성합니다.

    Build the tagged variant from nullable record fields. Raises
    ValidationError when more than one break is open. An open break on a shift
    that already has a check-out is closed at the check-out.
    """
    closed: list[ClosedBreak] = []
    open_break: OpenBreak | None = None
    for item in breaks:
        if isinstance(item, ClosedBreak):
            closed.append(item)
        elif open_break is not None:
            raise ValidationError("진행 중인 휴게는 하나만 허용됩니다 (Only one open break is allowed)")
        else:
            open_break = item

    if check_out is None:
        return OpenShift(check_in, tuple(closed), open_break)
    if open_break is not None:
        closed.append(ClosedBreak(start=open_break.start, end=check_out))
    return ClosedShift(check_in, check_out, tuple(closed))


# === 직렬화 (JSON serialization of the breaks column) ===

def _parse_instant(value: Any) -> datetime:
    if isinstance(value, datetime):
        return as_utc(value)
    return as_utc(datetime.fromisoformat(value))


def breaks_from_json(items: list[dict] | None) -> list[Break]:
    """breaks JSON 컬럼을 휴게 variant 목록으로 변환합니다."""
    result: list[Break] = []
    for item in items or []:
        start = _parse_instant(item["start"])
        if item.get("end") is None:
            result.append(OpenBreak(start=start))
        else:
            result.append(ClosedBreak(start=start, end=_parse_instant(item["end"])))
    return result


def breaks_to_json(breaks: Iterable[Break]) -> list[dict]:
    return [
        {
            "start": as_utc(b.start).isoformat(),
            "end": as_utc(b.end).isoformat() if b.end is not None else None,
        }
        for b in breaks
    ]


@dataclass
class BreakInput:
    """관리자 입력 휴게 — Raw break as entered by an administrator."""

    start: datetime
    end: datetime | None = field(default=None)


def normalize_breaks(items: Iterable[BreakInput], tz: ZoneInfo) -> list[Break]:
    """관리자 입력 휴게를 검증/정규화합니다.

    Naive times are local to ``tz``. A break whose end is earlier than its
    start crosses midnight and its end moves forward one day. A zero-length
    break is rejected.
    """
    result: list[Break] = []
    for item in items:
        start = as_utc(localize(item.start, tz))
        if item.end is None:
            result.append(OpenBreak(start=start))
            continue
        end = as_utc(localize(item.end, tz))
        if end == start:
            raise ValidationError("휴게 시작과 종료가 같습니다 (Break end must be after start)")
        if end < start:
            end += timedelta(days=1)
        result.append(ClosedBreak(start=start, end=end))
    return result
