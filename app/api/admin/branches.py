"""관리자 지점 라우터 — 지점 CRUD 엔드포인트.

Admin Branch Router — CRUD endpoints for branch management.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.branch import BranchCreate, BranchResponse, BranchUpdate
from app.services.branch_service import branch_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[BranchResponse])
async def list_branches(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[BranchResponse]:
    """지점 목록을 조회합니다."""
    return await branch_service.list_branches(db)


@router.post("", response_model=BranchResponse, status_code=201)
async def create_branch(
    data: BranchCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BranchResponse:
    """새 지점을 생성합니다.

    Create a branch. 409 when the name is taken.
    """
    result: BranchResponse = await branch_service.create_branch(db, data)
    await db.commit()
    return result


@router.put("/{branch_id}", response_model=BranchResponse)
async def rename_branch(
    branch_id: UUID,
    data: BranchUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BranchResponse:
    """지점명을 변경합니다."""
    result: BranchResponse = await branch_service.rename_branch(db, branch_id, data)
    await db.commit()
    return result


@router.delete("/{branch_id}", status_code=204)
async def delete_branch(
    branch_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """지점을 삭제합니다. 지점의 근무 기록도 함께 삭제됩니다.

    Delete a branch; its shift records are removed by the foreign-key cascade.
    """
    await branch_service.delete_branch(db, branch_id)
    await db.commit()
