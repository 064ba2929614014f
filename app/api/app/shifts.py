"""앱 근무 라우터 — 직원 출퇴근/휴게 기록 API.

App Shift Router — Staff-facing clock actions for one employee at one branch.
Each action returns the updated shift record; state conflicts are 409.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_active_employee, get_branch, get_employee
from app.database import get_db
from app.models.branch import Branch
from app.models.employee import Employee
from app.schemas.shift import ShiftRecordResponse, ShiftStatusResponse
from app.services.shift_service import shift_service

router: APIRouter = APIRouter(prefix="/branches/{branch_id}/employees/{employee_id}")


@router.get("/status", response_model=ShiftStatusResponse)
async def get_status(
    db: Annotated[AsyncSession, Depends(get_db)],
    branch: Annotated[Branch, Depends(get_branch)],
    employee: Annotated[Employee, Depends(get_employee)],
) -> dict:
    """직원의 현재 근무 상태를 조회합니다.

    Current lifecycle state (none / open / on_break) and the open record.
    """
    state, record = await shift_service.get_status(db, branch.id, employee.id)
    return {
        "branch_id": str(branch.id),
        "employee_id": str(employee.id),
        "state": state.value,
        "record": shift_service.build_response(record) if record is not None else None,
    }


@router.post("/clock-in", response_model=ShiftRecordResponse, status_code=201)
async def clock_in(
    db: Annotated[AsyncSession, Depends(get_db)],
    branch: Annotated[Branch, Depends(get_branch)],
    employee: Annotated[Employee, Depends(get_active_employee)],
) -> dict:
    """출근을 기록합니다.

    Open a new shift. 409 when a shift is already open at this branch.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        branch: 경로의 지점 (Branch from the path)
        employee: 경로의 재직 직원 (Active employee from the path)

    Returns:
        dict: 생성된 근무 기록 (Created open record)
    """
    record = await shift_service.clock_in(db, branch.id, employee.id, employee.name)
    return shift_service.build_response(record)


@router.post("/break-start", response_model=ShiftRecordResponse)
async def start_break(
    db: Annotated[AsyncSession, Depends(get_db)],
    branch: Annotated[Branch, Depends(get_branch)],
    employee: Annotated[Employee, Depends(get_employee)],
) -> dict:
    """휴게 시작을 기록합니다."""
    record = await shift_service.start_break(db, branch.id, employee.id)
    return shift_service.build_response(record)


@router.post("/break-end", response_model=ShiftRecordResponse)
async def end_break(
    db: Annotated[AsyncSession, Depends(get_db)],
    branch: Annotated[Branch, Depends(get_branch)],
    employee: Annotated[Employee, Depends(get_employee)],
) -> dict:
    """휴게 종료를 기록합니다."""
    record = await shift_service.end_break(db, branch.id, employee.id)
    return shift_service.build_response(record)


@router.post("/clock-out", response_model=ShiftRecordResponse)
async def clock_out(
    db: Annotated[AsyncSession, Depends(get_db)],
    branch: Annotated[Branch, Depends(get_branch)],
    employee: Annotated[Employee, Depends(get_employee)],
) -> dict:
    """퇴근을 기록합니다.

    Closes any open break, applies the minimum-break rule and returns the
    record with computed regular/night/total minutes.
    """
    record = await shift_service.clock_out(db, branch.id, employee.id)
    return shift_service.build_response(record)
