"""직원 레포지토리 — 직원 조회 및 시급 조회.

Employee Repository — Employee listing and hourly-rate lookup for payroll.
"""

from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.employee import Employee
from app.repositories.base import BaseRepository


class EmployeeRepository(BaseRepository[Employee]):
    """직원 레포지토리.

    Extends:
        BaseRepository[Employee]
    """

    def __init__(self) -> None:
        super().__init__(Employee)

    async def get_list(
        self,
        db: AsyncSession,
        active_only: bool = False,
    ) -> Sequence[Employee]:
        """직원 목록을 이름순으로 조회합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            active_only: True면 재직 중인 직원만 (Only active employees when True)
        """
        query: Select = select(Employee).order_by(Employee.name.asc())
        if active_only:
            query = query.where(Employee.is_active.is_(True))
        result = await db.execute(query)
        return result.scalars().all()

    async def lookup_hourly_rates(
        self,
        db: AsyncSession,
        employee_ids: Iterable[UUID],
    ) -> dict[UUID, int]:
        """직원별 시급을 조회합니다 — Hourly rate per employee id.

        Unknown ids are simply absent from the result.
        """
        ids: list[UUID] = list(employee_ids)
        if not ids:
            return {}
        query: Select = select(Employee.id, Employee.hourly_rate).where(Employee.id.in_(ids))
        result = await db.execute(query)
        return {row.id: row.hourly_rate for row in result.all()}


employee_repository: EmployeeRepository = EmployeeRepository()
