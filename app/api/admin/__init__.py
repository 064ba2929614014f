"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates all admin-facing endpoints
into a single router for inclusion in the FastAPI application.

Included routers:
    - branches: 지점 관리 (Branch management)
    - employees: 직원 관리 (Employee management, hourly rate, soft delete)
    - shifts: 근무 기록 관리 (Shift records: list, board, monthly, backfill, edit)
    - payroll: 급여 요약 (Payroll summary per branch)
"""

from fastapi import APIRouter

from app.api.admin.branches import router as branches_router
from app.api.admin.employees import router as employees_router
from app.api.admin.payroll import router as payroll_router
from app.api.admin.shifts import router as shifts_router

admin_router: APIRouter = APIRouter()

admin_router.include_router(branches_router, prefix="/branches", tags=["Branches"])
admin_router.include_router(employees_router, prefix="/employees", tags=["Employees"])
# 근무 기록: /branches/{branch_id}/shifts 및 /shifts/{record_id} (nested under branches)
admin_router.include_router(shifts_router, tags=["Shifts"])
# 급여: /branches/{branch_id}/payroll (nested under branches)
admin_router.include_router(payroll_router, tags=["Payroll"])
