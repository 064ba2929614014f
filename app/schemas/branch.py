"""지점 Pydantic 요청/응답 스키마 정의.

Branch Pydantic request/response schema definitions.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class BranchCreate(BaseModel):
    """지점 생성 요청 스키마.

    Attributes:
        name: 지점명 (Branch name, must not be blank)
    """

    name: str = Field(..., min_length=1, max_length=100)  # 지점명 (Branch name)


class BranchUpdate(BaseModel):
    """지점명 변경 요청 스키마."""

    name: str = Field(..., min_length=1, max_length=100)  # 변경할 지점명 (New branch name)


class BranchResponse(BaseModel):
    """지점 응답 스키마.

    Attributes:
        id: 지점 UUID (Branch unique identifier)
        name: 지점명 (Branch name)
        created_at: 생성 일시 (Creation timestamp)
    """

    id: str  # 지점 UUID 문자열 (Branch UUID as string)
    name: str  # 지점명 (Branch name)
    created_at: datetime  # 생성 일시 UTC (Creation timestamp)
