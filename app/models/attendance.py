"""근태 관련 SQLAlchemy ORM 모델 정의.

Attendance SQLAlchemy ORM model definitions.

Tables:
    - shift_records: 근무 기록 (One clock-in to clock-out session per row)
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import JSON, Boolean, Date, DateTime, ForeignKey, Index, Integer, String, Uuid, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class ShiftRecord(Base):
    """근무 기록 모델 — 출근부터 퇴근까지 하나의 근무 세션.

    Shift record model — One attendance session from check-in to check-out.
    ``check_out`` is null while the employee is still working or on break.
    ``breaks`` is an ordered JSON array of ``{"start": iso, "end": iso|null}``
    in insertion order; at most one entry may have a null end.

    Status flow: open -> on_break -> open -> ... -> closed

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        branch_id: 지점 FK (Branch where the session happened)
        employee_id: 직원 FK (Employee who worked)
        employee_name: 직원 이름 사본 (Denormalized display copy of the name)
        shift_date: 근무 시작일 (Local date the session started on)
        check_in: 출근 시각 (Check-in instant, never null)
        check_out: 퇴근 시각 (Check-out instant, null while open)
        breaks: 휴게 목록 JSON (Break intervals)
        modified_by_admin: 관리자 수정 여부 (Set once an admin touched the record)
        regular_minutes: 주간 근무 분 (Derived regular-hours minutes)
        night_minutes: 야간 근무 분 (Derived 22:00~05:00 minutes)
        total_minutes: 총 근무 분 (Derived; regular + night)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Constraints:
        uq_shift_records_open: 지점+직원별 미퇴근 기록은 하나만 허용
            (At most one open session per employee per branch)
    """

    __tablename__ = "shift_records"

    # 근무 기록 고유 식별자 — Record unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 지점 FK — Branch where the employee clocked in
    branch_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("branches.id", ondelete="CASCADE"), nullable=False)
    # 직원 FK — Employee who recorded the session
    employee_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)
    # 직원 이름 사본 — Display copy kept even if the employee is renamed later
    employee_name: Mapped[str] = mapped_column(String(100), nullable=False)
    # 근무 시작일 — Overnight shifts keep their start date
    shift_date: Mapped[date] = mapped_column(Date, nullable=False)
    check_in: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    check_out: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # 휴게 목록 — JSONB on PostgreSQL, JSON elsewhere
    breaks: Mapped[list] = mapped_column(JSON().with_variant(JSONB, "postgresql"), default=list, nullable=False)
    modified_by_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    regular_minutes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    night_minutes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_minutes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index(
            "uq_shift_records_open",
            "branch_id",
            "employee_id",
            unique=True,
            postgresql_where=text("check_out IS NULL"),
            sqlite_where=text("check_out IS NULL"),
        ),
        Index("ix_shift_records_branch_date", "branch_id", "shift_date"),
        Index("ix_shift_records_employee_date", "employee_id", "shift_date"),
    )
