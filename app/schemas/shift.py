"""근무 기록 Pydantic 요청/응답 스키마 정의.

Shift record Pydantic request/response schema definitions.
Instants in responses are UTC. Naive datetimes in admin requests are read
as store-local wall-clock time.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field


class BreakIn(BaseModel):
    """휴게 입력 스키마 — end가 없으면 진행 중인 휴게.

    Attributes:
        start: 휴게 시작 (Break start)
        end: 휴게 종료 (Break end; earlier than start means past midnight)
    """

    start: datetime  # 휴게 시작 (Break start)
    end: datetime | None = None  # 휴게 종료, 진행 중이면 None (Break end or None)


class BreakOut(BaseModel):
    start: datetime  # 휴게 시작 UTC (Break start)
    end: datetime | None  # 휴게 종료 UTC (Break end or None while open)


class ShiftRecordCreate(BaseModel):
    """관리자 수기 근무 기록 추가 요청 스키마.

    Manual backfill request. Without check_out the record is an open session.

    Attributes:
        employee_id: 직원 UUID (Employee identifier)
        check_in: 출근 시각 (Check-in, required)
        check_out: 퇴근 시각 (Check-out, optional)
        breaks: 휴게 목록 (Breaks, optional)
        shift_date: 근무일 (Defaults to local date of check_in)
    """

    employee_id: UUID  # 직원 UUID (Employee UUID)
    check_in: datetime | None  # 출근 시각 (Check-in; null is rejected by the service)
    check_out: datetime | None = None  # 퇴근 시각 (Check-out, optional)
    breaks: list[BreakIn] = Field(default_factory=list)  # 휴게 목록 (Breaks)
    shift_date: date | None = None  # 근무일 (Shift date, optional)


class ShiftRecordUpdate(BaseModel):
    """관리자 근무 기록 수정 요청 스키마 (부분 업데이트).

    Only fields present in the request body are applied. An explicit null
    check_out keeps the stored value; an explicit null check_in is rejected.
    """

    check_in: datetime | None = None  # 출근 시각 (Check-in)
    check_out: datetime | None = None  # 퇴근 시각 (Check-out)
    breaks: list[BreakIn] | None = None  # 휴게 목록 전체 교체 (Replaces all breaks)


class ShiftRecordResponse(BaseModel):
    """근무 기록 응답 스키마.

    Attributes:
        id: 근무 기록 UUID (Record identifier)
        state: 근무 상태 (none/open/on_break/closed)
        regular_minutes: 주간 근무 분 (Regular minutes)
        night_minutes: 야간 근무 분 (Night minutes)
        total_minutes: 총 근무 분 (Total minutes, regular + night)
    """

    id: str  # 근무 기록 UUID 문자열 (Record UUID as string)
    branch_id: str  # 지점 UUID 문자열 (Branch UUID as string)
    employee_id: str  # 직원 UUID 문자열 (Employee UUID as string)
    employee_name: str  # 직원 이름 사본 (Denormalized name)
    shift_date: date  # 근무일 — 출근일 기준 (Date the shift started on)
    check_in: datetime  # 출근 시각 UTC (Check-in)
    check_out: datetime | None  # 퇴근 시각 UTC (Check-out or None)
    breaks: list[BreakOut]  # 휴게 목록, 입력 순서 유지 (Breaks in insertion order)
    state: str  # 근무 상태 (Lifecycle state)
    modified_by_admin: bool  # 관리자 수정 여부 (Touched by an administrator)
    regular_minutes: int  # 주간 근무 분 (Regular minutes)
    night_minutes: int  # 야간 근무 분 (Night minutes)
    total_minutes: int  # 총 근무 분 (Total minutes)


class ShiftStatusResponse(BaseModel):
    """직원 근무 상태 응답 스키마 — 직원 화면용."""

    branch_id: str  # 지점 UUID (Branch UUID)
    employee_id: str  # 직원 UUID (Employee UUID)
    state: str  # 근무 상태 (none/open/on_break)
    record: ShiftRecordResponse | None  # 진행 중인 근무 기록 (Open record or None)
