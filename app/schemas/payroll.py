"""급여 요약 Pydantic 응답 스키마 정의.

Payroll summary response schema definitions.
"""

from datetime import date

from pydantic import BaseModel


class PayrollLineResponse(BaseModel):
    """직원별 급여 라인 응답 스키마.

    Attributes:
        employee_id: 직원 UUID (Employee identifier)
        employee_name: 직원 이름 (Employee name)
        regular_minutes: 주간 근무 분 (Regular minutes)
        night_minutes: 야간 근무 분 (Night minutes, 22:00–05:00)
        total_minutes: 총 근무 분 (Total minutes)
        hourly_rate: 적용 시급 (Hourly rate used)
        estimated_pay: 예상 급여 (Estimated pay)
        shift_count: 근무 횟수 (Number of closed shifts)
    """

    employee_id: str  # 직원 UUID 문자열 (Employee UUID as string)
    employee_name: str  # 직원 이름 (Employee name)
    regular_minutes: int  # 주간 근무 분 (Regular minutes)
    night_minutes: int  # 야간 근무 분 (Night minutes)
    total_minutes: int  # 총 근무 분 (Total minutes)
    hourly_rate: int  # 적용 시급 — 알 수 없으면 0 (Rate used, 0 when unknown)
    estimated_pay: int  # 예상 급여 (Estimated pay, rounded half up)
    shift_count: int  # 근무 횟수 (Number of shifts)


class PayrollSummaryResponse(BaseModel):
    """지점 급여 요약 응답 스키마."""

    branch_id: str  # 지점 UUID 문자열 (Branch UUID as string)
    date_from: date  # 시작일 (Range start, inclusive)
    date_to: date  # 종료일 (Range end, inclusive)
    lines: list[PayrollLineResponse]  # 직원별 급여 라인 (Per-employee lines)
    total_minutes: int  # 전체 근무 분 합계 (Sum over employees)
    total_estimated_pay: int  # 전체 예상 급여 합계 (Sum over employees)
