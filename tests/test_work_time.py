"""근무시간 계산 엔진 테스트.

Work-time engine tests — minute counting, night classification, break skipping,
minimum-break top-up, and the break/shift variants.
"""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from app.services.work_time import (
    BreakInput,
    ClosedBreak,
    ClosedShift,
    OpenBreak,
    OpenShift,
    ShiftState,
    WorkMinutes,
    apply_minimum_break,
    breaks_from_json,
    breaks_to_json,
    build_shift,
    compute_work_minutes,
    normalize_breaks,
)
from app.utils.exceptions import AlreadyOnBreakError, NotOnBreakError, ValidationError

SEOUL = ZoneInfo("Asia/Seoul")


def kst(*args: int) -> datetime:
    return datetime(*args, tzinfo=SEOUL)


def walk_minutes(check_in: datetime, check_out: datetime, breaks: list[ClosedBreak]) -> WorkMinutes:
    # 기준값 — 출근 시각부터 1분씩 순회
    minute = check_in.astimezone(timezone.utc)
    end = check_out.astimezone(timezone.utc)
    regular = night = 0
    while minute + timedelta(minutes=1) <= end:
        if not any(b.start <= minute < b.end for b in breaks):
            if minute.astimezone(SEOUL).hour in (22, 23, 0, 1, 2, 3, 4):
                night += 1
            else:
                regular += 1
        minute += timedelta(minutes=1)
    return WorkMinutes(regular=regular, night=night)


class TestComputeWorkMinutes:
    """주간/야간 근무 분 계산 테스트."""

    def test_day_shift_without_breaks(self):
        """09:00~17:00 → 주간 480분."""
        result = compute_work_minutes(kst(2026, 3, 2, 9), kst(2026, 3, 2, 17), [], SEOUL)
        assert (result.regular, result.night, result.total) == (480, 0, 480)

    def test_overnight_local_naive(self):
        """22:00~익일 10:00 (naive 현지 시각) → 야간 420, 주간 300."""
        result = compute_work_minutes(
            datetime(2026, 1, 1, 22, 0), datetime(2026, 1, 2, 10, 0), [], SEOUL
        )
        assert result.total == 720
        assert result.night == 420
        assert result.regular == 300

    def test_same_inputs_same_result(self):
        """같은 입력 두 번 → 같은 결과 (naive/aware 혼합, 휴게 포함)."""
        check_in = datetime(2026, 3, 2, 20, 15)
        check_out = datetime(2026, 3, 3, 1, 45, tzinfo=timezone.utc) - timedelta(hours=9)
        breaks = [
            ClosedBreak(start=datetime(2026, 3, 2, 21, 40), end=kst(2026, 3, 2, 22, 20)),
            OpenBreak(start=kst(2026, 3, 2, 23)),
        ]
        first = compute_work_minutes(check_in, check_out, breaks, SEOUL)
        second = compute_work_minutes(check_in, check_out, breaks, SEOUL)
        assert first == second
        assert (first.regular, first.night, first.total) == (85, 205, 290)

    def test_aware_utc_input_uses_store_local_hour(self):
        """UTC 13:00은 KST 22:00 — 야간으로 분류."""
        start = datetime(2026, 3, 2, 13, 0, tzinfo=timezone.utc)
        result = compute_work_minutes(start, start + timedelta(hours=1), [], SEOUL)
        assert result.night == 60
        assert result.regular == 0

    def test_night_boundaries(self):
        """21:30~22:30, 04:30~05:30 — 경계에서 절반씩."""
        evening = compute_work_minutes(kst(2026, 3, 2, 21, 30), kst(2026, 3, 2, 22, 30), [], SEOUL)
        dawn = compute_work_minutes(kst(2026, 3, 3, 4, 30), kst(2026, 3, 3, 5, 30), [], SEOUL)
        assert (evening.regular, evening.night) == (30, 30)
        assert (dawn.regular, dawn.night) == (30, 30)

    def test_closed_break_minutes_are_skipped(self):
        breaks = [ClosedBreak(start=kst(2026, 3, 2, 12), end=kst(2026, 3, 2, 13))]
        result = compute_work_minutes(kst(2026, 3, 2, 9), kst(2026, 3, 2, 18), breaks, SEOUL)
        assert result.total == 480

    def test_open_break_covers_nothing(self):
        breaks = [OpenBreak(start=kst(2026, 3, 2, 9, 30))]
        result = compute_work_minutes(kst(2026, 3, 2, 9), kst(2026, 3, 2, 10), breaks, SEOUL)
        assert result.total == 60

    def test_partial_minutes_are_floored(self):
        """초 단위 나머지는 버림 — 90초는 1분."""
        start = kst(2026, 3, 2, 9, 0)
        assert compute_work_minutes(start, start + timedelta(seconds=59), [], SEOUL).total == 0
        assert compute_work_minutes(start, start + timedelta(seconds=90), [], SEOUL).total == 1

    def test_missing_bound_returns_zero(self):
        result = compute_work_minutes(kst(2026, 3, 2, 9), None, [], SEOUL)
        assert (result.regular, result.night, result.total) == (0, 0, 0)
        assert compute_work_minutes(None, kst(2026, 3, 2, 9), [], SEOUL).total == 0

    def test_as_fields_uses_column_names(self):
        fields = compute_work_minutes(kst(2026, 3, 2, 21), kst(2026, 3, 2, 23), [], SEOUL).as_fields()
        assert fields == {"regular_minutes": 60, "night_minutes": 60, "total_minutes": 120}

    def test_ten_year_span(self):
        """10년 구간도 분 단위 순회 없이 계산 — 하루 야간 420분."""
        result = compute_work_minutes(kst(2026, 3, 2, 9), kst(2036, 3, 2, 9), [], SEOUL)
        assert result.total == 3653 * 1440
        assert result.night == 3653 * 420

    @pytest.mark.parametrize(
        "check_in, check_out, breaks",
        [
            (kst(2026, 3, 2, 21, 0, 30), kst(2026, 3, 3, 6, 10, 10), []),
            (
                kst(2026, 3, 2, 18, 0, 20),
                kst(2026, 3, 3, 9, 0),
                [
                    ClosedBreak(start=kst(2026, 3, 2, 21, 59, 50), end=kst(2026, 3, 2, 23, 0, 40)),
                    ClosedBreak(start=kst(2026, 3, 2, 22, 30), end=kst(2026, 3, 3, 0, 15)),
                    ClosedBreak(start=kst(2026, 3, 3, 4, 58, 30), end=kst(2026, 3, 3, 5, 1)),
                ],
            ),
            (
                kst(2026, 3, 1, 23, 0),
                kst(2026, 3, 4, 2, 0),
                [ClosedBreak(start=kst(2026, 2, 28, 12), end=kst(2026, 3, 1, 23, 30))],
            ),
        ],
    )
    def test_matches_minute_walk(self, check_in, check_out, breaks):
        """분 단위 순회 결과와 동일 — 초 단위 경계, 겹치는 휴게 포함."""
        assert compute_work_minutes(check_in, check_out, breaks, SEOUL) == walk_minutes(
            check_in, check_out, breaks
        )


class TestMinimumBreak:
    """8시간 이상 근무 시 휴게 1시간 보정 테스트."""

    def test_eight_and_a_half_hours_pushes_sixty(self):
        """09:00~17:30 휴게 없음 → 퇴근 18:30, 근무 분은 보정 전과 동일."""
        check_in, check_out = kst(2026, 3, 2, 9), kst(2026, 3, 2, 17, 30)
        new_out, breaks = apply_minimum_break(check_in, check_out, [])

        assert new_out == kst(2026, 3, 2, 18, 30)
        assert breaks == [ClosedBreak(start=check_out, end=new_out)]
        assert sum(b.minutes for b in breaks) >= 60
        assert compute_work_minutes(check_in, new_out, breaks, SEOUL).total == 510

    def test_exactly_eight_hours(self):
        check_in = kst(2026, 3, 2, 9)
        new_out, breaks = apply_minimum_break(check_in, kst(2026, 3, 2, 17), [])
        assert new_out == kst(2026, 3, 2, 18)
        assert compute_work_minutes(check_in, new_out, breaks, SEOUL).total == 480

    def test_shortfall_only(self):
        """휴게 30분 기록 → 부족분 30분만 연장."""
        existing = [ClosedBreak(start=kst(2026, 3, 2, 12), end=kst(2026, 3, 2, 12, 30))]
        new_out, breaks = apply_minimum_break(kst(2026, 3, 2, 9), kst(2026, 3, 2, 17, 30), existing)
        assert new_out == kst(2026, 3, 2, 18)
        assert breaks[0] == existing[0]
        assert breaks[1] == ClosedBreak(start=kst(2026, 3, 2, 17, 30), end=kst(2026, 3, 2, 18))

    def test_under_threshold_unchanged(self):
        check_out = kst(2026, 3, 2, 16, 59)
        new_out, breaks = apply_minimum_break(kst(2026, 3, 2, 9), check_out, [])
        assert new_out == check_out
        assert breaks == []

    def test_enough_break_unchanged(self):
        existing = [ClosedBreak(start=kst(2026, 3, 2, 12), end=kst(2026, 3, 2, 13))]
        new_out, breaks = apply_minimum_break(kst(2026, 3, 2, 9), kst(2026, 3, 2, 18), existing)
        assert new_out == kst(2026, 3, 2, 18)
        assert breaks == existing


class TestShiftVariants:
    """휴게/근무 variant 상태 전이 테스트."""

    def test_open_shift_break_cycle(self):
        shift = OpenShift(check_in=kst(2026, 3, 2, 9))
        assert shift.state == ShiftState.OPEN

        on_break = shift.start_break(kst(2026, 3, 2, 12))
        assert on_break.state == ShiftState.ON_BREAK
        with pytest.raises(AlreadyOnBreakError):
            on_break.start_break(kst(2026, 3, 2, 12, 5))

        back = on_break.end_break(kst(2026, 3, 2, 12, 30))
        assert back.state == ShiftState.OPEN
        assert back.breaks == (ClosedBreak(start=kst(2026, 3, 2, 12), end=kst(2026, 3, 2, 12, 30)),)
        with pytest.raises(NotOnBreakError):
            back.end_break(kst(2026, 3, 2, 13))

    def test_close_with_open_break_closes_it_at_now(self):
        shift = OpenShift(check_in=kst(2026, 3, 2, 9)).start_break(kst(2026, 3, 2, 13))
        closed = shift.close(kst(2026, 3, 2, 13, 30))

        assert closed.state == ShiftState.CLOSED
        assert closed.breaks == (ClosedBreak(start=kst(2026, 3, 2, 13), end=kst(2026, 3, 2, 13, 30)),)
        assert closed.work_minutes(SEOUL).total == 240

    def test_build_shift_rejects_two_open_breaks(self):
        breaks = [OpenBreak(start=kst(2026, 3, 2, 10)), OpenBreak(start=kst(2026, 3, 2, 11))]
        with pytest.raises(ValidationError):
            build_shift(kst(2026, 3, 2, 9), None, breaks)

    def test_build_shift_closes_open_break_at_check_out(self):
        breaks = [OpenBreak(start=kst(2026, 3, 2, 12))]
        shift = build_shift(kst(2026, 3, 2, 9), kst(2026, 3, 2, 13), breaks)
        assert isinstance(shift, ClosedShift)
        assert shift.breaks == (ClosedBreak(start=kst(2026, 3, 2, 12), end=kst(2026, 3, 2, 13)),)


class TestBreakNormalization:
    """관리자 입력 휴게 정규화 및 JSON 직렬화 테스트."""

    def test_end_before_start_crosses_midnight(self):
        breaks = normalize_breaks(
            [BreakInput(start=datetime(2026, 3, 2, 23, 30), end=datetime(2026, 3, 2, 0, 30))], SEOUL
        )
        assert breaks == [ClosedBreak(start=kst(2026, 3, 2, 23, 30), end=kst(2026, 3, 3, 0, 30))]
        assert breaks[0].minutes == 60

    def test_zero_length_break_rejected(self):
        with pytest.raises(ValidationError):
            normalize_breaks([BreakInput(start=datetime(2026, 3, 2, 12), end=datetime(2026, 3, 2, 12))], SEOUL)

    def test_json_keeps_order_and_open_end(self):
        breaks = [
            ClosedBreak(start=kst(2026, 3, 2, 12), end=kst(2026, 3, 2, 12, 30)),
            OpenBreak(start=kst(2026, 3, 2, 15)),
        ]
        stored = breaks_to_json(breaks)
        assert stored[0] == {"start": "2026-03-02T03:00:00+00:00", "end": "2026-03-02T03:30:00+00:00"}
        assert stored[1]["end"] is None
        assert breaks_from_json(stored) == breaks
