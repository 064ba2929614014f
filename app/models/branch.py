"""지점 SQLAlchemy ORM 모델 정의.

Branch SQLAlchemy ORM model definition.

Tables:
    - branches: 매장 지점 (Store branches where employees clock in)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Branch(Base):
    """지점 모델 — 출퇴근이 기록되는 매장 단위.

    Branch model — A physical store location. Shift records are scoped to a branch.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 지점명 (Branch name, e.g. "강남점", unique)
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "branches"

    # 지점 고유 식별자 — Branch unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 지점명 — Branch display name (unique)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
