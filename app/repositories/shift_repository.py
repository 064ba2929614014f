"""근무 기록 레포지토리 — 출퇴근 기록 저장소.

Shift Record Repository — The record store behind the shift lifecycle.
Open-session lookup, filtered listing, and streaming of closed records for
payroll aggregation.
"""

from collections.abc import AsyncIterator
from datetime import date
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.attendance import ShiftRecord
from app.repositories.base import BaseRepository


class ShiftRepository(BaseRepository[ShiftRecord]):
    """근무 기록 레포지토리.

    Extends:
        BaseRepository[ShiftRecord]
    """

    def __init__(self) -> None:
        super().__init__(ShiftRecord)

    async def find_open_record(
        self,
        db: AsyncSession,
        branch_id: UUID,
        employee_id: UUID,
        for_update: bool = True,
    ) -> ShiftRecord | None:
        """지점+직원의 미퇴근(check_out IS NULL) 기록을 조회합니다.

        Find the open session for an employee at a branch. Identity-map state
        is overwritten so the result always reflects the latest write. With
        ``for_update`` the row is locked FOR UPDATE where the dialect supports it.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            branch_id: 지점 UUID (Branch UUID)
            employee_id: 직원 UUID (Employee UUID)
            for_update: 행 잠금 여부 (Lock the row for a following write)

        Returns:
            ShiftRecord | None: 진행 중인 근무 기록 또는 None (Open record or None)
        """
        query: Select = (
            select(ShiftRecord)
            .where(
                ShiftRecord.branch_id == branch_id,
                ShiftRecord.employee_id == employee_id,
                ShiftRecord.check_out.is_(None),
            )
            .order_by(ShiftRecord.check_in.desc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_for_update(self, db: AsyncSession, record_id: UUID) -> ShiftRecord | None:
        """근무 기록을 최신 상태로 다시 읽고 행을 잠급니다.

        Re-read a record by id, overwriting identity-map state and locking the
        row FOR UPDATE where the dialect supports it.
        """
        query: Select = (
            select(ShiftRecord)
            .where(ShiftRecord.id == record_id)
            .execution_options(populate_existing=True)
            .with_for_update()
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    def _filtered_query(
        self,
        branch_id: UUID | None = None,
        employee_id: UUID | None = None,
        shift_date: date | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        closed_only: bool = False,
    ) -> Select:
        query: Select = select(ShiftRecord)

        if branch_id is not None:
            query = query.where(ShiftRecord.branch_id == branch_id)
        if employee_id is not None:
            query = query.where(ShiftRecord.employee_id == employee_id)
        if shift_date is not None:
            query = query.where(ShiftRecord.shift_date == shift_date)
        if date_from is not None:
            query = query.where(ShiftRecord.shift_date >= date_from)
        if date_to is not None:
            query = query.where(ShiftRecord.shift_date <= date_to)
        if closed_only:
            query = query.where(ShiftRecord.check_out.is_not(None))

        return query

    async def get_by_filters(
        self,
        db: AsyncSession,
        branch_id: UUID | None = None,
        employee_id: UUID | None = None,
        shift_date: date | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        page: int = 1,
        per_page: int = 50,
    ) -> tuple[Sequence[ShiftRecord], int]:
        """필터 조건에 맞는 근무 기록을 최신순으로 페이지네이션 조회합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            branch_id: 지점 UUID 필터 (Optional branch filter)
            employee_id: 직원 UUID 필터 (Optional employee filter)
            shift_date: 근무일 필터 (Optional single-day filter)
            date_from: 시작일 필터 (Optional range start, inclusive)
            date_to: 종료일 필터 (Optional range end, inclusive)
            page: 페이지 번호, 1부터 시작 (Page number, 1-based)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[Sequence[ShiftRecord], int]: (근무 기록 목록, 전체 개수)
        """
        query = self._filtered_query(branch_id, employee_id, shift_date, date_from, date_to)
        query = query.order_by(ShiftRecord.shift_date.desc(), ShiftRecord.check_in.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def get_employee_period(
        self,
        db: AsyncSession,
        branch_id: UUID,
        employee_id: UUID,
        date_from: date,
        date_to: date,
    ) -> Sequence[ShiftRecord]:
        """직원의 기간별 근무 기록을 날짜순으로 조회합니다 (e.g. 월간 근무표)."""
        query = self._filtered_query(branch_id, employee_id, date_from=date_from, date_to=date_to)
        query = query.order_by(ShiftRecord.shift_date.asc(), ShiftRecord.check_in.asc())
        result = await db.execute(query)
        return result.scalars().all()

    async def get_board_candidates(
        self,
        db: AsyncSession,
        branch_id: UUID,
        today: date,
    ) -> Sequence[ShiftRecord]:
        """오늘 시작했거나 아직 퇴근하지 않은 지점의 근무 기록을 조회합니다.

        Records started today plus every open session in the branch
        (an overnight shift started yesterday is still relevant today).
        """
        query: Select = (
            select(ShiftRecord)
            .where(
                ShiftRecord.branch_id == branch_id,
                or_(ShiftRecord.shift_date == today, ShiftRecord.check_out.is_(None)),
            )
            .order_by(ShiftRecord.check_in.asc())
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def stream_closed(
        self,
        db: AsyncSession,
        branch_id: UUID,
        date_from: date,
        date_to: date,
        employee_id: UUID | None = None,
    ) -> AsyncIterator[ShiftRecord]:
        """기간 내 퇴근 완료 기록을 스트리밍합니다 — 급여 집계용.

        Stream closed records in [date_from, date_to] so large ranges are
        folded without materializing every row.
        """
        query = self._filtered_query(
            branch_id, employee_id, date_from=date_from, date_to=date_to, closed_only=True
        ).order_by(ShiftRecord.shift_date.asc())
        result = await db.stream_scalars(query)
        async for record in result:
            yield record


shift_repository: ShiftRepository = ShiftRepository()
