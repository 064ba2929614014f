"""앱 API 라우터 패키지 — 직원용 엔드포인트 통합.

App API Router package — Aggregates the staff-facing endpoints into a single
router for inclusion in the FastAPI application.

Included routers:
    - shifts: 출퇴근/휴게 기록 (Clock-in, break, clock-out, status)
"""

from fastapi import APIRouter

from app.api.app.shifts import router as shifts_router

app_router: APIRouter = APIRouter()

# 근무: /branches/{branch_id}/employees/{employee_id} 하위 (Clock actions)
app_router.include_router(shifts_router, tags=["Clock"])
