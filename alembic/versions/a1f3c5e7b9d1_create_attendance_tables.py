"""create_attendance_tables

Revision ID: a1f3c5e7b9d1
Revises:
Create Date: 2026-10-18 09:00:00.000000

지점/직원/근무 기록 테이블 생성: branches, employees, shift_records.
Create branches, employees and shift_records tables.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = 'a1f3c5e7b9d1'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # branches — 지점 (unique name)
    op.create_table(
        'branches',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # employees — 직원 (soft delete via is_active)
    op.create_table(
        'employees',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('hourly_rate', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('joined_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # shift_records — 근무 기록 (one check-in to check-out session)
    op.create_table(
        'shift_records',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('branch_id', UUID(as_uuid=True), sa.ForeignKey('branches.id', ondelete='CASCADE'), nullable=False),
        sa.Column('employee_id', UUID(as_uuid=True), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('employee_name', sa.String(100), nullable=False),
        sa.Column('shift_date', sa.Date(), nullable=False),
        sa.Column('check_in', sa.DateTime(timezone=True), nullable=False),
        sa.Column('check_out', sa.DateTime(timezone=True), nullable=True),
        sa.Column('breaks', JSONB(), server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column('modified_by_admin', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('regular_minutes', sa.Integer(), server_default='0', nullable=False),
        sa.Column('night_minutes', sa.Integer(), server_default='0', nullable=False),
        sa.Column('total_minutes', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # 근무 기록 인덱스 — Shift record indexes
    op.create_index('ix_shift_records_branch_date', 'shift_records', ['branch_id', 'shift_date'])
    op.create_index('ix_shift_records_employee_date', 'shift_records', ['employee_id', 'shift_date'])

    # 부분 유니크 인덱스 — 지점+직원당 미퇴근 기록 하나만 허용
    # At most one open shift per employee per branch
    op.create_index(
        'uq_shift_records_open',
        'shift_records',
        ['branch_id', 'employee_id'],
        unique=True,
        postgresql_where=sa.text('check_out IS NULL'),
    )


def downgrade() -> None:
    op.drop_index('uq_shift_records_open', table_name='shift_records')
    op.drop_index('ix_shift_records_employee_date', table_name='shift_records')
    op.drop_index('ix_shift_records_branch_date', table_name='shift_records')
    op.drop_table('shift_records')
    op.drop_table('employees')
    op.drop_table('branches')
