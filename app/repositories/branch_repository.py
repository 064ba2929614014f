"""지점 레포지토리 — Branch CRUD queries."""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.branch import Branch
from app.repositories.base import BaseRepository


class BranchRepository(BaseRepository[Branch]):

    def __init__(self) -> None:
        super().__init__(Branch)

    async def get_by_name(self, db: AsyncSession, name: str) -> Branch | None:
        query: Select = select(Branch).where(Branch.name == name)
        result = await db.execute(query)
        return result.scalar_one_or_none()


branch_repository: BranchRepository = BranchRepository()
