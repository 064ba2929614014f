"""지점 서비스 — 지점 CRUD 비즈니스 로직.

Branch Service — Business logic for branch creation, listing, rename and
deletion. Deleting a branch cascades to its shift records.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.branch import Branch
from app.repositories.branch_repository import branch_repository
from app.schemas.branch import BranchCreate, BranchResponse, BranchUpdate
from app.utils.exceptions import DuplicateError, NotFoundError


class BranchService:
    """지점 관련 비즈니스 로직을 처리하는 서비스."""

    def _to_response(self, branch: Branch) -> BranchResponse:
        return BranchResponse(id=str(branch.id), name=branch.name, created_at=branch.created_at)

    async def get_branch(self, db: AsyncSession, branch_id: UUID) -> Branch:
        """지점을 조회합니다.

        Raises:
            NotFoundError: 지점을 찾을 수 없을 때 (Branch not found)
        """
        branch: Branch | None = await branch_repository.get_by_id(db, branch_id)
        if branch is None:
            raise NotFoundError("지점을 찾을 수 없습니다 (Branch not found)")
        return branch

    async def list_branches(self, db: AsyncSession) -> list[BranchResponse]:
        """지점 목록을 이름순으로 조회합니다."""
        branches: Sequence[Branch] = await branch_repository.get_all(db, order_by=Branch.name.asc())
        return [self._to_response(b) for b in branches]

    async def create_branch(self, db: AsyncSession, data: BranchCreate) -> BranchResponse:
        """새 지점을 생성합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 지점 생성 데이터 (Branch creation data)

        Returns:
            BranchResponse: 생성된 지점 응답 (Created branch response)

        Raises:
            DuplicateError: 같은 이름의 지점이 이미 존재할 때
                            (When a branch with the same name already exists)
        """
        name: str = data.name.strip()
        if await branch_repository.get_by_name(db, name) is not None:
            raise DuplicateError("같은 이름의 지점이 이미 있습니다 (A branch with this name already exists)")

        branch: Branch = await branch_repository.create(db, {"name": name})
        return self._to_response(branch)

    async def rename_branch(self, db: AsyncSession, branch_id: UUID, data: BranchUpdate) -> BranchResponse:
        """지점명을 변경합니다.

        Raises:
            NotFoundError: 지점을 찾을 수 없을 때 (Branch not found)
            DuplicateError: 다른 지점이 같은 이름을 쓰고 있을 때 (Name taken)
        """
        branch: Branch = await self.get_branch(db, branch_id)
        name: str = data.name.strip()
        if name != branch.name:
            # 이름 변경 시 중복 확인 — Check name uniqueness if changing name
            if await branch_repository.get_by_name(db, name) is not None:
                raise DuplicateError("같은 이름의 지점이 이미 있습니다 (A branch with this name already exists)")

        updated: Branch | None = await branch_repository.update(db, branch.id, {"name": name})
        return self._to_response(updated)

    async def delete_branch(self, db: AsyncSession, branch_id: UUID) -> None:
        """지점을 삭제합니다.

        Raises:
            NotFoundError: 지점을 찾을 수 없을 때 (Branch not found)
        """
        deleted: bool = await branch_repository.delete(db, branch_id)
        if not deleted:
            raise NotFoundError("지점을 찾을 수 없습니다 (Branch not found)")


# 싱글턴 인스턴스 — Singleton instance
branch_service: BranchService = BranchService()
