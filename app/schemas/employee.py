"""직원 Pydantic 요청/응답 스키마 정의.

Employee Pydantic request/response schema definitions.
The minimum-wage rule is a business rule checked by the service, not here,
because the minimum wage is configuration.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class EmployeeCreate(BaseModel):
    """직원 등록 요청 스키마.

    Attributes:
        name: 직원 이름 (Employee name)
        hourly_rate: 시급 (Hourly wage, at least the configured minimum wage)
    """

    name: str = Field(..., min_length=1, max_length=100)  # 직원 이름 (Employee name)
    hourly_rate: int = Field(..., ge=0)  # 시급, 원 단위 (Hourly wage)


class EmployeeRateUpdate(BaseModel):
    """시급 변경 요청 스키마."""

    hourly_rate: int = Field(..., ge=0)  # 새 시급 (New hourly wage)


class EmployeeResponse(BaseModel):
    """직원 응답 스키마.

    Attributes:
        id: 직원 UUID (Employee unique identifier)
        name: 직원 이름 (Employee name)
        hourly_rate: 시급 (Hourly wage)
        is_active: 재직 여부 (Active flag; False after soft delete)
        joined_at: 입사 일시 (Join timestamp)
    """

    id: str  # 직원 UUID 문자열 (Employee UUID as string)
    name: str  # 직원 이름 (Employee name)
    hourly_rate: int  # 시급 (Hourly wage)
    is_active: bool  # 재직 여부 (Active flag)
    joined_at: datetime  # 입사 일시 UTC (Join timestamp)
