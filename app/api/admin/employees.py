"""관리자 직원 라우터 — 직원 등록/시급 변경/퇴사·복직 엔드포인트.

Admin Employee Router — Employee registration, hourly-rate changes and
soft delete / reactivation.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.employee import EmployeeCreate, EmployeeRateUpdate, EmployeeResponse
from app.services.employee_service import employee_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[EmployeeResponse])
async def list_employees(
    db: Annotated[AsyncSession, Depends(get_db)],
    active_only: Annotated[bool, Query()] = False,
) -> list[EmployeeResponse]:
    """직원 목록을 이름순으로 조회합니다.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        active_only: 재직자만 조회 (Only active employees)
    """
    return await employee_service.list_employees(db, active_only=active_only)


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EmployeeResponse:
    """직원 상세를 조회합니다 (퇴사자 포함)."""
    return await employee_service.get_employee_detail(db, employee_id)


@router.post("", response_model=EmployeeResponse, status_code=201)
async def create_employee(
    data: EmployeeCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EmployeeResponse:
    """직원을 등록합니다. 시급이 최저시급 미만이면 400.

    Register an employee. 400 when the hourly rate is below minimum wage.
    """
    result: EmployeeResponse = await employee_service.create_employee(db, data)
    await db.commit()
    return result


@router.put("/{employee_id}/hourly-rate", response_model=EmployeeResponse)
async def update_hourly_rate(
    employee_id: UUID,
    data: EmployeeRateUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EmployeeResponse:
    """직원 시급을 변경합니다."""
    result: EmployeeResponse = await employee_service.update_rate(db, employee_id, data.hourly_rate)
    await db.commit()
    return result


@router.post("/{employee_id}/deactivate", response_model=EmployeeResponse)
async def deactivate_employee(
    employee_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EmployeeResponse:
    """직원을 퇴사 처리합니다 (soft delete). 근무 기록은 유지됩니다."""
    result: EmployeeResponse = await employee_service.set_active(db, employee_id, False)
    await db.commit()
    return result


@router.post("/{employee_id}/reactivate", response_model=EmployeeResponse)
async def reactivate_employee(
    employee_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EmployeeResponse:
    """퇴사 처리된 직원을 복직 처리합니다."""
    result: EmployeeResponse = await employee_service.set_active(db, employee_id, True)
    await db.commit()
    return result
