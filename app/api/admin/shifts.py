"""관리자 근무 기록 라우터 — 근무 기록 조회/수정/수기 추가 API.

Admin Shift Router — List, detail, branch board, monthly sheet, manual
backfill and correction of shift records.
"""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_branch, get_employee
from app.database import get_db
from app.models.branch import Branch
from app.models.employee import Employee
from app.schemas.common import PaginatedResponse
from app.schemas.shift import ShiftRecordCreate, ShiftRecordResponse, ShiftRecordUpdate
from app.services.employee_service import employee_service
from app.services.shift_service import shift_service
from app.services.work_time import BreakInput

router: APIRouter = APIRouter()


@router.get("/branches/{branch_id}/shifts", response_model=PaginatedResponse)
async def list_shifts(
    db: Annotated[AsyncSession, Depends(get_db)],
    branch: Annotated[Branch, Depends(get_branch)],
    employee_id: Annotated[UUID | None, Query()] = None,
    shift_date: Annotated[date | None, Query()] = None,
    date_from: Annotated[date | None, Query()] = None,
    date_to: Annotated[date | None, Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=200)] = 50,
) -> dict:
    """지점의 근무 기록 목록을 최신순으로 조회합니다.

    List shift records of a branch, newest first.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        branch: 경로의 지점 (Branch from the path)
        employee_id: 직원 UUID 필터, 선택 (Optional employee filter)
        shift_date: 근무일 필터, 선택 (Optional single-day filter)
        date_from: 시작일 필터, 선택 (Optional range start)
        date_to: 종료일 필터, 선택 (Optional range end)
        page: 페이지 번호 (Page number)
        per_page: 페이지당 항목 수 (Items per page)

    Returns:
        dict: 페이지네이션된 근무 기록 목록 (Paginated shift records)
    """
    records, total = await shift_service.list_records(
        db,
        branch.id,
        employee_id=employee_id,
        shift_date=shift_date,
        date_from=date_from,
        date_to=date_to,
        page=page,
        per_page=per_page,
    )
    return {
        "items": [shift_service.build_response(r) for r in records],
        "total": total,
        "page": page,
        "per_page": per_page,
    }


@router.get("/branches/{branch_id}/shifts/board", response_model=list[ShiftRecordResponse])
async def branch_board(
    db: Annotated[AsyncSession, Depends(get_db)],
    branch: Annotated[Branch, Depends(get_branch)],
    today: Annotated[date | None, Query()] = None,
) -> list[dict]:
    """지점 현황판 — 직원별 가장 최근 근무 기록.

    One record per employee: the latest check-in among today's records and
    every session still open (overnight shifts included).
    """
    records = await shift_service.branch_board(db, branch.id, today)
    return [shift_service.build_response(r) for r in records]


@router.get(
    "/branches/{branch_id}/employees/{employee_id}/shifts/monthly",
    response_model=list[ShiftRecordResponse],
)
async def monthly_shifts(
    db: Annotated[AsyncSession, Depends(get_db)],
    branch: Annotated[Branch, Depends(get_branch)],
    employee: Annotated[Employee, Depends(get_employee)],
    year: Annotated[int, Query(ge=2000, le=2100)],
    month: Annotated[int, Query(ge=1, le=12)],
) -> list[dict]:
    """직원의 월간 근무표를 날짜순으로 조회합니다."""
    records = await shift_service.monthly_shifts(db, branch.id, employee.id, year, month)
    return [shift_service.build_response(r) for r in records]


@router.post("/branches/{branch_id}/shifts", response_model=ShiftRecordResponse, status_code=201)
async def add_shift(
    data: ShiftRecordCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    branch: Annotated[Branch, Depends(get_branch)],
) -> dict:
    """근무 기록을 수기로 추가합니다.

    Manual backfill. Naive times are store-local. The minimum-break rule is
    applied when a check-out is given.

    Args:
        data: 수기 추가 요청 데이터 (Backfill request data)
        db: 비동기 데이터베이스 세션 (Async database session)
        branch: 경로의 지점 (Branch from the path)

    Returns:
        dict: 생성된 근무 기록 (Created record)
    """
    employee = await employee_service.get_employee(db, data.employee_id)
    record = await shift_service.add_record(
        db,
        branch.id,
        employee.id,
        employee.name,
        check_in=data.check_in,
        check_out=data.check_out,
        breaks=[BreakInput(start=b.start, end=b.end) for b in data.breaks],
        shift_date=data.shift_date,
    )
    return shift_service.build_response(record)


@router.get("/shifts/{record_id}", response_model=ShiftRecordResponse)
async def get_shift(
    record_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """근무 기록 상세를 조회합니다."""
    record = await shift_service.get_record(db, record_id)
    return shift_service.build_response(record)


@router.patch("/shifts/{record_id}", response_model=ShiftRecordResponse)
async def edit_shift(
    record_id: UUID,
    data: ShiftRecordUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """근무 기록을 수정합니다 (부분 업데이트).

    Administrative correction of check_in / check_out / breaks. Derived
    minutes are recomputed and the record is flagged as modified.

    Args:
        record_id: 근무 기록 UUID (Shift record UUID)
        data: 수정 요청 데이터 — 보낸 필드만 적용 (Only sent fields apply)
        db: 비동기 데이터베이스 세션 (Async database session)

    Returns:
        dict: 수정된 근무 기록 (Updated record)
    """
    changes: dict = data.model_dump(exclude_unset=True)
    if data.breaks is not None:
        changes["breaks"] = [BreakInput(start=b.start, end=b.end) for b in data.breaks]

    record = await shift_service.edit_record(db, record_id, changes)
    return shift_service.build_response(record)
