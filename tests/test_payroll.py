"""급여 집계 테스트.

Payroll aggregation tests — the pure reducer, rounding, missing rates, and
the streamed summary over stored records.
"""

import uuid
from dataclasses import dataclass
from datetime import date, datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.payroll_service import (
    PayrollAccumulator,
    aggregate_shifts,
    estimate_pay,
    payroll_service,
)
from app.utils.exceptions import BadRequestError


@dataclass
class Row:
    employee_id: uuid.UUID
    employee_name: str
    regular_minutes: int
    night_minutes: int
    total_minutes: int


class TestAggregate:
    """순수 집계 함수 테스트."""

    def test_two_records_one_employee(self):
        """(300, 60) + (120, 0), 시급 10,000 → 85,000원."""
        emp = uuid.uuid4()
        rows = [Row(emp, "김민수", 300, 60, 360), Row(emp, "김민수", 120, 0, 120)]
        lines = aggregate_shifts(rows, {emp: 10000})

        line = lines[emp]
        assert line.regular_minutes == 420
        assert line.night_minutes == 60
        assert line.total_minutes == 480
        assert line.estimated_pay == 85000
        assert line.shift_count == 2

    def test_missing_rate_is_zero(self):
        emp = uuid.uuid4()
        lines = aggregate_shifts([Row(emp, "퇴사자", 600, 0, 600)], {})
        assert lines[emp].hourly_rate == 0
        assert lines[emp].estimated_pay == 0
        assert lines[emp].total_minutes == 600

    def test_groups_by_employee(self):
        a, b = uuid.uuid4(), uuid.uuid4()
        rows = [Row(a, "A", 60, 0, 60), Row(b, "B", 0, 60, 60), Row(a, "A", 60, 0, 60)]
        lines = aggregate_shifts(rows, {a: 10000, b: 10000})
        assert lines[a].estimated_pay == 20000
        assert lines[b].estimated_pay == 15000

    def test_empty_input(self):
        assert aggregate_shifts([], {}) == {}

    def test_accumulator_matches_reducer(self):
        emp = uuid.uuid4()
        acc = PayrollAccumulator()
        acc.add(Row(emp, "김민수", 300, 60, 360))
        acc.add(Row(emp, "김민수", 120, 0, 120))
        assert acc.employee_ids() == [emp]
        assert acc.result({emp: 10000})[emp].estimated_pay == 85000


class TestEstimatePay:
    """예상 급여 반올림 테스트."""

    def test_half_rounds_up(self):
        """1분 × 시급 150 = 2.5 → 3 (은행가 반올림 아님)."""
        assert estimate_pay(1, 0, 150) == 3

    def test_fraction_below_half_rounds_down(self):
        # 1분 × 10,030 / 60 = 167.166...
        assert estimate_pay(1, 0, 10030) == 167

    def test_night_multiplier(self):
        assert estimate_pay(0, 60, 10000) == 15000
        assert estimate_pay(0, 60, 10000, night_multiplier=2.0) == 20000


class TestPayrollSummary:
    """기간별 급여 요약 (DB) 테스트."""

    async def test_summary_uses_closed_records_in_range(
        self, db: AsyncSession, service, branch, employee, other_employee
    ):
        # 17:00~23:00 → 주간 300, 야간 60
        await service.add_record(
            db, branch.id, employee.id, employee.name,
            check_in=datetime(2026, 3, 2, 17, 0), check_out=datetime(2026, 3, 2, 23, 0),
        )
        # 10:00~12:00 → 주간 120
        await service.add_record(
            db, branch.id, employee.id, employee.name,
            check_in=datetime(2026, 3, 3, 10, 0), check_out=datetime(2026, 3, 3, 12, 0),
        )
        # 범위 밖 — outside the range
        await service.add_record(
            db, branch.id, employee.id, employee.name,
            check_in=datetime(2026, 4, 1, 10, 0), check_out=datetime(2026, 4, 1, 12, 0),
        )
        # 미퇴근 기록은 제외 — open records are not aggregated
        await service.add_record(
            db, branch.id, other_employee.id, other_employee.name,
            check_in=datetime(2026, 3, 4, 10, 0),
        )
        await db.commit()

        lines = await payroll_service.payroll_summary(db, branch.id, date(2026, 3, 1), date(2026, 3, 31))

        assert len(lines) == 1
        line = lines[0]
        assert line.employee_id == employee.id
        assert (line.regular_minutes, line.night_minutes) == (420, 60)
        assert line.hourly_rate == 10000
        assert line.estimated_pay == 85000

    async def test_summary_sorted_by_name_and_filtered(
        self, db: AsyncSession, service, branch, employee, other_employee
    ):
        for emp in (employee, other_employee):
            await service.add_record(
                db, branch.id, emp.id, emp.name,
                check_in=datetime(2026, 3, 2, 10, 0), check_out=datetime(2026, 3, 2, 11, 0),
            )
        await db.commit()

        lines = await payroll_service.payroll_summary(db, branch.id, date(2026, 3, 1), date(2026, 3, 31))
        assert [line.employee_name for line in lines] == ["김민수", "이서연"]
        assert lines[1].estimated_pay == 12000

        only = await payroll_service.payroll_summary(
            db, branch.id, date(2026, 3, 1), date(2026, 3, 31), employee_id=other_employee.id
        )
        assert [line.employee_id for line in only] == [other_employee.id]

    async def test_reversed_range_rejected(self, db: AsyncSession, branch):
        with pytest.raises(BadRequestError):
            await payroll_service.payroll_summary(db, branch.id, date(2026, 3, 31), date(2026, 3, 1))
