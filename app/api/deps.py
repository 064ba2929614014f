"""FastAPI 의존성 주입 모듈 — 경로 파라미터 리소스 확인.

FastAPI dependency injection module — Resolves path parameters to existing
rows so routers receive a loaded Branch / Employee or a 404.

Usage:
    @router.get("/branches/{branch_id}/...")
    async def handler(branch: Annotated[Branch, Depends(get_branch)]) -> ...
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.branch import Branch
from app.models.employee import Employee
from app.services.branch_service import branch_service
from app.services.employee_service import employee_service


async def get_branch(
    branch_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Branch:
    """경로의 branch_id로 지점을 조회합니다.

    Raises:
        NotFoundError: 지점이 없을 때 (Branch not found)
    """
    return await branch_service.get_branch(db, branch_id)


async def get_employee(
    employee_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Employee:
    """경로의 employee_id로 직원을 조회합니다 (퇴사자 포함)."""
    return await employee_service.get_employee(db, employee_id)


async def get_active_employee(
    employee_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Employee:
    """재직 중인 직원만 허용합니다 — 출퇴근 동작용.

    Raises:
        NotFoundError: 직원이 없을 때 (Employee not found)
        BadRequestError: 퇴사 처리된 직원일 때 (Employee is deactivated)
    """
    return await employee_service.get_active_employee(db, employee_id)
