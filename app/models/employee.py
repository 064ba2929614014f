"""직원 SQLAlchemy ORM 모델 정의.

Employee SQLAlchemy ORM model definition.

Tables:
    - employees: 직원 (Employees with hourly rate, soft-deleted via is_active)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Employee(Base):
    """직원 모델 — 시급 정보를 가진 근무자.

    Employee model. Deleting an employee is a soft delete (is_active=False) so
    historical shift records keep their owner.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 직원 이름 (Display name)
        hourly_rate: 시급, 원 단위 (Hourly wage in currency units)
        is_active: 재직 여부 (True: employed, False: left)
        joined_at: 입사 일시 UTC (Join timestamp)
    """

    __tablename__ = "employees"

    # 직원 고유 식별자 — Employee unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # 시급 — Hourly wage, validated against settings.MINIMUM_WAGE by the service
    hourly_rate: Mapped[int] = mapped_column(Integer, nullable=False)
    # 재직 여부 — Soft-delete flag
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
