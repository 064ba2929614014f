"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package registers every model with the metadata, which
Alembic and ``Base.metadata.create_all`` rely on.

Modules:
    branch: 지점 (Branch)
    employee: 직원 (Employee)
    attendance: 근무 기록 (ShiftRecord)
"""

from app.models.branch import Branch
from app.models.employee import Employee
from app.models.attendance import ShiftRecord

__all__ = [
    "Branch",
    "Employee",
    "ShiftRecord",
]
