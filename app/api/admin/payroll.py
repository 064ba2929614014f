"""관리자 급여 라우터 — 기간별 급여 요약 API.

Admin Payroll Router — Per-employee payroll summary of a branch over a date
range, computed from closed shift records.
"""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_branch
from app.database import get_db
from app.models.branch import Branch
from app.schemas.payroll import PayrollSummaryResponse
from app.services.payroll_service import payroll_service

router: APIRouter = APIRouter()


@router.get("/branches/{branch_id}/payroll", response_model=PayrollSummaryResponse)
async def payroll_summary(
    db: Annotated[AsyncSession, Depends(get_db)],
    branch: Annotated[Branch, Depends(get_branch)],
    date_from: Annotated[date, Query()],
    date_to: Annotated[date, Query()],
    employee_id: Annotated[UUID | None, Query()] = None,
) -> dict:
    """지점의 기간별 급여 요약을 조회합니다.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        branch: 경로의 지점 (Branch from the path)
        date_from: 시작일, 포함 (Range start, inclusive)
        date_to: 종료일, 포함 (Range end, inclusive)
        employee_id: 특정 직원만 조회, 선택 (Optional employee filter)

    Returns:
        dict: 직원별 급여 라인과 합계 (Per-employee lines and totals)
    """
    lines = await payroll_service.payroll_summary(db, branch.id, date_from, date_to, employee_id)
    return {
        "branch_id": str(branch.id),
        "date_from": date_from,
        "date_to": date_to,
        "lines": [
            {
                "employee_id": str(line.employee_id),
                "employee_name": line.employee_name,
                "regular_minutes": line.regular_minutes,
                "night_minutes": line.night_minutes,
                "total_minutes": line.total_minutes,
                "hourly_rate": line.hourly_rate,
                "estimated_pay": line.estimated_pay,
                "shift_count": line.shift_count,
            }
            for line in lines
        ],
        "total_minutes": sum(line.total_minutes for line in lines),
        "total_estimated_pay": sum(line.estimated_pay for line in lines),
    }
