"""급여 집계 서비스 — 직원별 근무 분 합산 및 예상 급여 계산.

Payroll Service — Folds closed shift records into one payroll line per
employee. Aggregation only sums the stored minute fields; it never recomputes
work time from check-in/check-out.

    estimated_pay = round_half_up(regular/60 * rate + night/60 * rate * 1.5)
"""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Protocol
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.repositories.employee_repository import employee_repository
from app.repositories.shift_repository import shift_repository
from app.utils.exceptions import BadRequestError

MINUTES_PER_HOUR: Decimal = Decimal(60)


class MinuteRecord(Protocol):
    """집계 입력 — Anything carrying the stored minute fields of a shift."""

    employee_id: UUID
    employee_name: str
    regular_minutes: int
    night_minutes: int
    total_minutes: int


@dataclass
class PayrollLine:
    """직원별 급여 집계 결과.

    Attributes:
        employee_id: 직원 UUID (Employee UUID)
        employee_name: 직원 이름 (Name copied from the first record seen)
        regular_minutes: 주간 근무 분 합계 (Summed regular minutes)
        night_minutes: 야간 근무 분 합계 (Summed night minutes)
        total_minutes: 총 근무 분 합계 (Summed total minutes)
        hourly_rate: 적용 시급, 없으면 0 (Rate used; 0 when unknown)
        estimated_pay: 예상 급여 (Estimated pay, rounded half up)
        shift_count: 집계된 근무 수 (Number of shifts folded in)
    """

    employee_id: UUID
    employee_name: str
    regular_minutes: int = 0
    night_minutes: int = 0
    total_minutes: int = 0
    hourly_rate: int = 0
    estimated_pay: int = 0
    shift_count: int = 0


def estimate_pay(
    regular_minutes: int,
    night_minutes: int,
    hourly_rate: int,
    night_multiplier: float = 1.5,
) -> int:
    """예상 급여를 계산합니다 — 0.5는 올림 (round half up).

    Decimal arithmetic with a single final division keeps ``x.5`` results exact.
    """
    rate = Decimal(hourly_rate)
    minute_pay = (
        Decimal(regular_minutes) * rate
        + Decimal(night_minutes) * rate * Decimal(str(night_multiplier))
    )
    amount = minute_pay / MINUTES_PER_HOUR
    return int(amount.quantize(Decimal(1), rounding=ROUND_HALF_UP))


class PayrollAccumulator:
    """급여 집계기 — 기록을 하나씩 받아 직원별로 합산합니다.

    Incremental fold so records can be streamed from the store instead of
    loaded at once. Call :meth:`result` with the rate map when done.
    """

    def __init__(self) -> None:
        self._lines: dict[UUID, PayrollLine] = {}

    def add(self, record: MinuteRecord) -> None:
        line = self._lines.get(record.employee_id)
        if line is None:
            line = PayrollLine(employee_id=record.employee_id, employee_name=record.employee_name)
            self._lines[record.employee_id] = line
        line.regular_minutes += record.regular_minutes
        line.night_minutes += record.night_minutes
        line.total_minutes += record.total_minutes
        line.shift_count += 1

    def employee_ids(self) -> list[UUID]:
        return list(self._lines)

    def result(
        self,
        hourly_rates: dict[UUID, int],
        night_multiplier: float = 1.5,
    ) -> dict[UUID, PayrollLine]:
        """시급을 적용해 직원별 급여 라인을 반환합니다. 시급이 없으면 0으로 계산."""
        for employee_id, line in self._lines.items():
            line.hourly_rate = hourly_rates.get(employee_id, 0)
            line.estimated_pay = estimate_pay(
                line.regular_minutes, line.night_minutes, line.hourly_rate, night_multiplier
            )
        return dict(self._lines)


def aggregate_shifts(
    records: Iterable[MinuteRecord],
    hourly_rates: dict[UUID, int],
    night_multiplier: float = 1.5,
) -> dict[UUID, PayrollLine]:
    """근무 기록 목록을 직원별 급여 라인으로 집계합니다.

    Args:
        records: 퇴근 완료된 근무 기록 (Closed shift records)
        hourly_rates: 직원별 시급 {employee_id: rate} (Missing ids are paid 0)
        night_multiplier: 야간 가산 배율 (Night premium multiplier)

    Returns:
        dict[UUID, PayrollLine]: 직원별 급여 라인 (One line per employee)
    """
    accumulator = PayrollAccumulator()
    for record in records:
        accumulator.add(record)
    return accumulator.result(hourly_rates, night_multiplier)


class PayrollService:
    """급여 요약 서비스 — 기간별 지점 급여 집계."""

    async def payroll_summary(
        self,
        db: AsyncSession,
        branch_id: UUID,
        date_from: date,
        date_to: date,
        employee_id: UUID | None = None,
    ) -> list[PayrollLine]:
        """지점의 기간별 급여 요약을 직원 이름순으로 반환합니다.

        Streams closed records whose shift_date is within [date_from, date_to],
        then looks up hourly rates for the employees seen.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            branch_id: 지점 UUID (Branch UUID)
            date_from: 시작일, 포함 (Range start, inclusive)
            date_to: 종료일, 포함 (Range end, inclusive)
            employee_id: 특정 직원만 집계 (Optional single-employee filter)

        Raises:
            BadRequestError: 시작일이 종료일보다 늦을 때 (date_from after date_to)
        """
        if date_from > date_to:
            raise BadRequestError("시작일이 종료일보다 늦습니다 (date_from must not be after date_to)")

        accumulator = PayrollAccumulator()
        async for record in shift_repository.stream_closed(db, branch_id, date_from, date_to, employee_id):
            accumulator.add(record)

        rates = await employee_repository.lookup_hourly_rates(db, accumulator.employee_ids())
        lines = accumulator.result(rates, settings.NIGHT_PAY_MULTIPLIER)
        return sorted(lines.values(), key=lambda line: line.employee_name)


# 싱글턴 인스턴스 — Singleton instance
payroll_service: PayrollService = PayrollService()
