"""근무 세션 서비스 — 출근/휴게/퇴근 상태 전이 및 관리자 수정.

Shift Lifecycle Service — Clock-in, break, and clock-out transitions for one
(branch, employee) pair, plus administrator edits and manual backfills.

    NONE --clock_in--> OPEN --start_break--> ON_BREAK --end_break--> OPEN
    OPEN/ON_BREAK --clock_out--> CLOSED

Every write goes through the work-time engine so derived minute fields stay
consistent. Operations on the same (branch, employee) key are serialized, and
each write commits before the key lock is released so the next holder reads
the committed row.
"""

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Sequence
from uuid import UUID
from zoneinfo import ZoneInfo

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.attendance import ShiftRecord
from app.repositories.shift_repository import shift_repository
from app.services.work_time import (
    BreakInput,
    ClosedShift,
    OpenShift,
    Shift,
    ShiftState,
    WorkMinutes,
    as_utc,
    breaks_from_json,
    breaks_to_json,
    build_shift,
    localize,
    normalize_breaks,
)
from app.utils.exceptions import AlreadyOpenError, NotClockedInError, NotFoundError, ValidationError
from app.utils.locks import shift_locks


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def shift_of(record: ShiftRecord) -> Shift:
    """저장된 근무 기록을 근무 variant로 변환합니다."""
    check_out = as_utc(record.check_out) if record.check_out is not None else None
    return build_shift(as_utc(record.check_in), check_out, breaks_from_json(record.breaks))


def state_of(record: ShiftRecord | None) -> ShiftState:
    if record is None:
        return ShiftState.NONE
    return shift_of(record).state


class ShiftService:
    """근무 세션 서비스.

    Shift lifecycle service. ``clock`` supplies "now" and is injectable so the
    transitions can be tested with fixed instants.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock: Callable[[], datetime] = clock or _utc_now

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(settings.STORE_TIMEZONE)

    def _now(self) -> datetime:
        return as_utc(self._clock())

    def local_today(self) -> date:
        return self._now().astimezone(self.tz).date()

    def _shift_fields(self, shift: Shift) -> dict[str, Any]:
        # check_out/breaks/파생 필드 — open sessions carry zero derived minutes
        fields: dict[str, Any] = {"breaks": breaks_to_json(shift.breaks)}
        if isinstance(shift, ClosedShift):
            fields["check_out"] = shift.check_out
            fields.update(shift.work_minutes(self.tz).as_fields())
        else:
            fields["check_out"] = None
            fields.update(WorkMinutes().as_fields())
        return fields

    # === 조회 (Reads) ===

    async def get_record(self, db: AsyncSession, record_id: UUID) -> ShiftRecord:
        """근무 기록 단건을 조회합니다.

        Raises:
            NotFoundError: 근무 기록이 없을 때 (When the record does not exist)
        """
        record: ShiftRecord | None = await shift_repository.get_by_id(db, record_id)
        if record is None:
            raise NotFoundError("근무 기록을 찾을 수 없습니다 (Shift record not found)")
        return record

    async def get_status(
        self,
        db: AsyncSession,
        branch_id: UUID,
        employee_id: UUID,
    ) -> tuple[ShiftState, ShiftRecord | None]:
        """직원의 현재 근무 상태와 진행 중인 기록을 반환합니다."""
        record = await shift_repository.find_open_record(db, branch_id, employee_id, for_update=False)
        return state_of(record), record

    async def branch_board(
        self,
        db: AsyncSession,
        branch_id: UUID,
        today: date | None = None,
    ) -> list[ShiftRecord]:
        """지점 현황판 — 직원별로 가장 최근 출근한 기록 하나씩.

        Among records started today and all open sessions of the branch, keep
        the latest check-in per employee.
        """
        candidates = await shift_repository.get_board_candidates(db, branch_id, today or self.local_today())
        latest: dict[UUID, ShiftRecord] = {}
        for record in candidates:
            current = latest.get(record.employee_id)
            if current is None or as_utc(record.check_in) > as_utc(current.check_in):
                latest[record.employee_id] = record
        return sorted(latest.values(), key=lambda r: r.employee_name)

    async def get_period_records(
        self,
        db: AsyncSession,
        branch_id: UUID,
        employee_id: UUID,
        date_from: date,
        date_to: date,
    ) -> Sequence[ShiftRecord]:
        return await shift_repository.get_employee_period(db, branch_id, employee_id, date_from, date_to)

    async def monthly_shifts(
        self,
        db: AsyncSession,
        branch_id: UUID,
        employee_id: UUID,
        year: int,
        month: int,
    ) -> Sequence[ShiftRecord]:
        """직원의 월간 근무 기록 — shift_date 기준 해당 월 전체."""
        last_day: int = calendar.monthrange(year, month)[1]
        return await self.get_period_records(
            db, branch_id, employee_id, date(year, month, 1), date(year, month, last_day)
        )

    async def list_records(
        self,
        db: AsyncSession,
        branch_id: UUID,
        employee_id: UUID | None = None,
        shift_date: date | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        page: int = 1,
        per_page: int = 50,
    ) -> tuple[Sequence[ShiftRecord], int]:
        return await shift_repository.get_by_filters(
            db,
            branch_id=branch_id,
            employee_id=employee_id,
            shift_date=shift_date,
            date_from=date_from,
            date_to=date_to,
            page=page,
            per_page=per_page,
        )

    # === 상태 전이 (Lifecycle transitions) ===

    async def _require_open(
        self,
        db: AsyncSession,
        branch_id: UUID,
        employee_id: UUID,
    ) -> tuple[ShiftRecord, OpenShift]:
        record = await shift_repository.find_open_record(db, branch_id, employee_id)
        if record is None:
            raise NotClockedInError()
        shift = shift_of(record)
        if not isinstance(shift, OpenShift):
            raise NotClockedInError()
        return record, shift

    async def _create(self, db: AsyncSession, fields: dict[str, Any]) -> ShiftRecord:
        try:
            record = await shift_repository.create(db, fields)
        except IntegrityError:
            # 다른 프로세스가 먼저 출근 기록을 만든 경우 — another writer opened a session first
            await db.rollback()
            if fields.get("check_out") is None and await shift_repository.find_open_record(
                db, fields["branch_id"], fields["employee_id"], for_update=False
            ) is not None:
                raise AlreadyOpenError()
            raise
        await db.commit()
        return record

    async def clock_in(
        self,
        db: AsyncSession,
        branch_id: UUID,
        employee_id: UUID,
        employee_name: str,
    ) -> ShiftRecord:
        """출근 — 새 근무 기록을 생성합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            branch_id: 지점 UUID (Branch UUID)
            employee_id: 직원 UUID (Employee UUID)
            employee_name: 직원 이름 사본 (Denormalized employee name)

        Returns:
            ShiftRecord: 생성된 근무 기록 (Created open record)

        Raises:
            AlreadyOpenError: 이미 출근 상태일 때 (An open session already exists)
        """
        async with shift_locks.hold((branch_id, employee_id)):
            if await shift_repository.find_open_record(db, branch_id, employee_id) is not None:
                raise AlreadyOpenError()

            now: datetime = self._now()
            return await self._create(
                db,
                {
                    "branch_id": branch_id,
                    "employee_id": employee_id,
                    "employee_name": employee_name,
                    "shift_date": now.astimezone(self.tz).date(),
                    "check_in": now,
                    "check_out": None,
                    "breaks": [],
                    "modified_by_admin": False,
                    "regular_minutes": 0,
                    "night_minutes": 0,
                    "total_minutes": 0,
                },
            )

    async def start_break(self, db: AsyncSession, branch_id: UUID, employee_id: UUID) -> ShiftRecord:
        """휴게 시작.

        Raises:
            NotClockedInError: 출근 기록이 없을 때
            AlreadyOnBreakError: 이미 휴게 중일 때
        """
        async with shift_locks.hold((branch_id, employee_id)):
            record, shift = await self._require_open(db, branch_id, employee_id)
            shift = shift.start_break(self._now())
            updated = await shift_repository.update(db, record.id, self._shift_fields(shift))
            await db.commit()
            return updated

    async def end_break(self, db: AsyncSession, branch_id: UUID, employee_id: UUID) -> ShiftRecord:
        """휴게 종료.

        Raises:
            NotClockedInError: 출근 기록이 없을 때
            NotOnBreakError: 휴게 중이 아닐 때
        """
        async with shift_locks.hold((branch_id, employee_id)):
            record, shift = await self._require_open(db, branch_id, employee_id)
            shift = shift.end_break(self._now())
            updated = await shift_repository.update(db, record.id, self._shift_fields(shift))
            await db.commit()
            return updated

    async def clock_out(self, db: AsyncSession, branch_id: UUID, employee_id: UUID) -> ShiftRecord:
        """퇴근 — 진행 중인 휴게를 닫고 근무시간을 계산합니다.

        Closes any open break at check-out, applies the minimum-break top-up
        (8h+ of work with under 60 minutes of break extends the check-out and
        appends a synthetic break), then recomputes derived minutes.

        Raises:
            NotClockedInError: 출근 기록이 없을 때 (No open session)
        """
        async with shift_locks.hold((branch_id, employee_id)):
            record, shift = await self._require_open(db, branch_id, employee_id)
            closed: ClosedShift = shift.close(self._now())
            updated = await shift_repository.update(db, record.id, self._shift_fields(closed))
            await db.commit()
            return updated

    # === 관리자 기능 (Administrative entry points) ===

    def _resolve(
        self,
        check_in: datetime,
        check_out: datetime | None,
        breaks: list,
    ) -> Shift:
        if check_out is not None and check_out <= check_in:
            raise ValidationError("퇴근 시간은 출근 시간 이후여야 합니다 (Check-out must be after check-in)")
        if check_out is not None and check_out - check_in > timedelta(hours=settings.MAX_SHIFT_HOURS):
            raise ValidationError(
                f"근무 시간이 {settings.MAX_SHIFT_HOURS}시간을 넘습니다 "
                f"(Shift longer than {settings.MAX_SHIFT_HOURS} hours)"
            )
        shift = build_shift(check_in, check_out, breaks)
        if isinstance(shift, ClosedShift):
            shift = shift.with_minimum_break()
        return shift

    def _input_instant(self, value: datetime) -> datetime:
        return as_utc(localize(value, self.tz))

    async def edit_record(
        self,
        db: AsyncSession,
        record_id: UUID,
        changes: dict[str, Any],
    ) -> ShiftRecord:
        """관리자 근무 기록 수정 — 상태 전이를 거치지 않는 부분 수정.

        Administrative edit of check_in / check_out / breaks on any record,
        open or closed. Naive datetimes are store-local. An explicit null
        check_out keeps the stored value. The minimum-break top-up runs again
        whenever the result has a check-out; derived minutes are recomputed and
        the record is flagged ``modified_by_admin``. The row is re-read and
        written under the key lock and committed before the lock is released.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 근무 기록 UUID (Shift record UUID)
            changes: 수정할 필드 — only keys present are applied
                     ("check_in", "check_out", "breaks" as BreakInput list)

        Raises:
            NotFoundError: 근무 기록이 없을 때
            ValidationError: 출근 시간이 비었거나 시각이 잘못되었거나 MAX_SHIFT_HOURS를 넘을 때
        """
        if "check_in" in changes and changes["check_in"] is None:
            raise ValidationError("출근 시간은 필수입니다 (Check-in is required)")

        # 키(지점, 직원)는 변하지 않음 — the key columns never change, so a first read finds the lock
        found = await self.get_record(db, record_id)
        async with shift_locks.hold((found.branch_id, found.employee_id)):
            record = await shift_repository.get_for_update(db, record_id)
            if record is None:
                raise NotFoundError("근무 기록을 찾을 수 없습니다 (Shift record not found)")
            check_in = (
                self._input_instant(changes["check_in"])
                if changes.get("check_in") is not None
                else as_utc(record.check_in)
            )
            if changes.get("check_out") is not None:
                check_out: datetime | None = self._input_instant(changes["check_out"])
            else:
                check_out = as_utc(record.check_out) if record.check_out is not None else None
            if changes.get("breaks") is not None:
                breaks = normalize_breaks(changes["breaks"], self.tz)
            else:
                breaks = breaks_from_json(record.breaks)

            shift = self._resolve(check_in, check_out, breaks)
            fields = self._shift_fields(shift)
            fields["check_in"] = check_in
            fields["modified_by_admin"] = True
            updated = await shift_repository.update(db, record.id, fields)
            await db.commit()
            return updated

    async def add_record(
        self,
        db: AsyncSession,
        branch_id: UUID,
        employee_id: UUID,
        employee_name: str,
        check_in: datetime | None,
        check_out: datetime | None = None,
        breaks: list[BreakInput] | None = None,
        shift_date: date | None = None,
    ) -> ShiftRecord:
        """관리자 수기 근무 기록 추가 — Manual backfill of a shift.

        Same validation, top-up and recomputation as :meth:`edit_record`.
        A backfill without check-out opens a session and is refused while
        another session is open for the same employee at the branch.

        Raises:
            ValidationError: 출근 시간이 없거나 시각이 잘못되었을 때
            AlreadyOpenError: 미퇴근 기록을 추가하려는데 이미 출근 상태일 때
        """
        if check_in is None:
            raise ValidationError("출근 시간은 필수입니다 (Check-in is required)")

        start = self._input_instant(check_in)
        end = self._input_instant(check_out) if check_out is not None else None
        shift = self._resolve(start, end, normalize_breaks(breaks or [], self.tz))

        fields = self._shift_fields(shift)
        fields.update(
            {
                "branch_id": branch_id,
                "employee_id": employee_id,
                "employee_name": employee_name,
                "shift_date": shift_date or start.astimezone(self.tz).date(),
                "check_in": start,
                "modified_by_admin": True,
            }
        )

        async with shift_locks.hold((branch_id, employee_id)):
            if isinstance(shift, OpenShift):
                if await shift_repository.find_open_record(db, branch_id, employee_id) is not None:
                    raise AlreadyOpenError()
            return await self._create(db, fields)

    # === 응답 (Response building) ===

    def build_response(self, record: ShiftRecord) -> dict:
        """근무 기록 응답 딕셔너리를 구성합니다.

        Build a response dict with UTC instants and the derived lifecycle state.
        """
        return {
            "id": str(record.id),
            "branch_id": str(record.branch_id),
            "employee_id": str(record.employee_id),
            "employee_name": record.employee_name,
            "shift_date": record.shift_date,
            "check_in": as_utc(record.check_in),
            "check_out": as_utc(record.check_out) if record.check_out is not None else None,
            "breaks": [
                {"start": b.start, "end": b.end}
                for b in breaks_from_json(record.breaks)
            ],
            "state": state_of(record).value,
            "modified_by_admin": record.modified_by_admin,
            "regular_minutes": record.regular_minutes,
            "night_minutes": record.night_minutes,
            "total_minutes": record.total_minutes,
        }


shift_service: ShiftService = ShiftService()
