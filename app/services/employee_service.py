"""직원 서비스 — 직원 등록, 시급 변경, 퇴사/복직 처리.

Employee Service — Registration, hourly-rate changes and soft delete /
reactivation. Hourly rates below ``settings.MINIMUM_WAGE`` are refused.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.employee import Employee
from app.repositories.employee_repository import employee_repository
from app.schemas.employee import EmployeeCreate, EmployeeResponse
from app.utils.exceptions import BadRequestError, NotFoundError


class EmployeeService:
    """직원 관련 비즈니스 로직을 처리하는 서비스."""

    def _to_response(self, employee: Employee) -> EmployeeResponse:
        """직원 모델을 응답 스키마로 변환합니다."""
        return EmployeeResponse(
            id=str(employee.id),
            name=employee.name,
            hourly_rate=employee.hourly_rate,
            is_active=employee.is_active,
            joined_at=employee.joined_at,
        )

    def _check_minimum_wage(self, hourly_rate: int) -> None:
        if hourly_rate < settings.MINIMUM_WAGE:
            raise BadRequestError(
                f"시급은 최저시급({settings.MINIMUM_WAGE:,}원) 이상이어야 합니다 "
                f"(Hourly rate must be at least {settings.MINIMUM_WAGE})"
            )

    async def get_employee(self, db: AsyncSession, employee_id: UUID) -> Employee:
        """직원을 조회합니다.

        Raises:
            NotFoundError: 직원을 찾을 수 없을 때 (Employee not found)
        """
        employee: Employee | None = await employee_repository.get_by_id(db, employee_id)
        if employee is None:
            raise NotFoundError("직원을 찾을 수 없습니다 (Employee not found)")
        return employee

    async def get_employee_detail(self, db: AsyncSession, employee_id: UUID) -> EmployeeResponse:
        return self._to_response(await self.get_employee(db, employee_id))

    async def get_active_employee(self, db: AsyncSession, employee_id: UUID) -> Employee:
        """재직 중인 직원을 조회합니다 — 출근 등 근무 동작 전 확인용.

        Raises:
            NotFoundError: 직원을 찾을 수 없을 때
            BadRequestError: 퇴사 처리된 직원일 때 (Employee is deactivated)
        """
        employee: Employee = await self.get_employee(db, employee_id)
        if not employee.is_active:
            raise BadRequestError("퇴사 처리된 직원입니다 (Employee is deactivated)")
        return employee

    async def list_employees(self, db: AsyncSession, active_only: bool = False) -> list[EmployeeResponse]:
        employees: Sequence[Employee] = await employee_repository.get_list(db, active_only=active_only)
        return [self._to_response(e) for e in employees]

    async def create_employee(self, db: AsyncSession, data: EmployeeCreate) -> EmployeeResponse:
        """새 직원을 재직 상태로 등록합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 직원 등록 데이터 (Employee creation data)

        Returns:
            EmployeeResponse: 등록된 직원 응답 (Created employee response)

        Raises:
            BadRequestError: 시급이 최저시급 미만일 때 (Rate below minimum wage)
        """
        self._check_minimum_wage(data.hourly_rate)
        employee: Employee = await employee_repository.create(
            db,
            {"name": data.name.strip(), "hourly_rate": data.hourly_rate, "is_active": True},
        )
        return self._to_response(employee)

    async def update_rate(self, db: AsyncSession, employee_id: UUID, hourly_rate: int) -> EmployeeResponse:
        """직원 시급을 변경합니다.

        Raises:
            NotFoundError: 직원을 찾을 수 없을 때
            BadRequestError: 시급이 최저시급 미만일 때
        """
        self._check_minimum_wage(hourly_rate)
        await self.get_employee(db, employee_id)
        employee = await employee_repository.update(db, employee_id, {"hourly_rate": hourly_rate})
        return self._to_response(employee)

    async def set_active(self, db: AsyncSession, employee_id: UUID, is_active: bool) -> EmployeeResponse:
        """퇴사(soft delete) 또는 복직 처리합니다.

        Shift records are kept either way; only the active flag changes.
        """
        await self.get_employee(db, employee_id)
        employee = await employee_repository.update(db, employee_id, {"is_active": is_active})
        return self._to_response(employee)


# 싱글턴 인스턴스 — Singleton instance
employee_service: EmployeeService = EmployeeService()
