"""직원 출퇴근 API 테스트.

Staff clock API tests — status, clock-in, breaks and clock-out over HTTP,
including state-conflict and lookup errors.
"""

import uuid
from datetime import datetime

from httpx import AsyncClient

from tests.conftest import KST, clock_url


class TestClockFlow:
    """출퇴근 흐름 테스트."""

    async def test_full_shift(self, client: AsyncClient, clock, branch, employee):
        res = await client.post(clock_url(branch, employee, "clock-in"))
        assert res.status_code == 201
        data = res.json()
        assert data["state"] == "open"
        assert data["employee_name"] == "김민수"
        assert data["shift_date"] == "2026-03-02"

        clock.advance(hours=3)
        res = await client.post(clock_url(branch, employee, "break-start"))
        assert res.status_code == 200
        assert res.json()["state"] == "on_break"

        clock.advance(hours=1)
        res = await client.post(clock_url(branch, employee, "break-end"))
        assert res.status_code == 200
        assert res.json()["state"] == "open"

        clock.advance(hours=5)
        res = await client.post(clock_url(branch, employee, "clock-out"))
        assert res.status_code == 200
        data = res.json()
        assert data["state"] == "closed"
        assert data["total_minutes"] == 480
        assert data["regular_minutes"] == 480
        assert datetime.fromisoformat(data["check_out"]) == datetime(2026, 3, 2, 18, 0, tzinfo=KST)

    async def test_clock_out_pushes_check_out(self, client: AsyncClient, clock, branch, employee):
        await client.post(clock_url(branch, employee, "clock-in"))
        clock.advance(hours=8, minutes=30)
        res = await client.post(clock_url(branch, employee, "clock-out"))

        data = res.json()
        assert datetime.fromisoformat(data["check_out"]) == datetime(2026, 3, 2, 18, 30, tzinfo=KST)
        assert len(data["breaks"]) == 1
        assert data["total_minutes"] == 510

    async def test_status(self, client: AsyncClient, branch, employee):
        res = await client.get(clock_url(branch, employee, "status"))
        assert res.status_code == 200
        assert res.json()["state"] == "none"
        assert res.json()["record"] is None

        await client.post(clock_url(branch, employee, "clock-in"))
        res = await client.get(clock_url(branch, employee, "status"))
        assert res.json()["state"] == "open"
        assert res.json()["record"]["check_out"] is None


class TestClockErrors:
    """상태 충돌 및 조회 오류 테스트."""

    async def test_double_clock_in_conflict(self, client: AsyncClient, branch, employee):
        await client.post(clock_url(branch, employee, "clock-in"))
        res = await client.post(clock_url(branch, employee, "clock-in"))
        assert res.status_code == 409
        assert "Already clocked in" in res.json()["detail"]

    async def test_actions_before_clock_in(self, client: AsyncClient, branch, employee):
        for action in ("break-start", "break-end", "clock-out"):
            res = await client.post(clock_url(branch, employee, action))
            assert res.status_code == 409
            assert "Not clocked in" in res.json()["detail"]

    async def test_break_conflicts(self, client: AsyncClient, branch, employee):
        await client.post(clock_url(branch, employee, "clock-in"))
        res = await client.post(clock_url(branch, employee, "break-end"))
        assert res.status_code == 409

        await client.post(clock_url(branch, employee, "break-start"))
        res = await client.post(clock_url(branch, employee, "break-start"))
        assert res.status_code == 409
        assert "Already on break" in res.json()["detail"]

    async def test_unknown_branch(self, client: AsyncClient, employee):
        url = f"/api/v1/app/branches/{uuid.uuid4()}/employees/{employee.id}/clock-in"
        res = await client.post(url)
        assert res.status_code == 404

    async def test_unknown_employee(self, client: AsyncClient, branch):
        url = f"/api/v1/app/branches/{branch.id}/employees/{uuid.uuid4()}/clock-in"
        res = await client.post(url)
        assert res.status_code == 404

    async def test_deactivated_employee_cannot_clock_in(self, client: AsyncClient, db, branch, employee):
        employee.is_active = False
        await db.commit()
        res = await client.post(clock_url(branch, employee, "clock-in"))
        assert res.status_code == 400
