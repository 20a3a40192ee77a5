"""daily test assignment: departments, employees, leave, tests, assignments, history

Revision ID: 3f1a9c2d7e10
Revises:
Create Date: 2024-04-20 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'departments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('department_id', sa.Integer(), sa.ForeignKey('departments.id', ondelete='SET NULL'), nullable=True),
        sa.Column('code', sa.String(length=32), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=80), nullable=False),
        sa.Column('last_name', sa.String(length=80), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('test_eligible', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('code'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_emp_dept_id', 'employees', ['department_id'], unique=False)
    op.create_index('ix_emp_test_eligible', 'employees', ['is_active', 'test_eligible'], unique=False)

    op.create_table(
        'leave_requests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_leave_requests_employee_id', 'leave_requests', ['employee_id'], unique=False)
    op.create_index('ix_leave_emp_status_range', 'leave_requests',
                    ['employee_id', 'status', 'start_date', 'end_date'], unique=False)

    op.create_table(
        'tests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('instructions', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='active'),
        sa.Column('assignment_type', sa.String(length=32), nullable=False, server_default='automatic'),
        sa.Column('assigned_employees', sa.JSON(), nullable=True),
        sa.Column('assigned_departments', sa.JSON(), nullable=True),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_tests_status_order', 'tests', ['status', 'display_order'], unique=False)

    op.create_table(
        'test_assignments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('test_id', sa.Integer(), sa.ForeignKey('tests.id', ondelete='CASCADE'), nullable=False),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('assigned_date', sa.Date(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('test_id', 'employee_id', 'assigned_date', name='uq_test_assignment_triple'),
    )
    op.create_index('ix_test_assignments_test_id', 'test_assignments', ['test_id'], unique=False)
    op.create_index('ix_test_assignments_employee_id', 'test_assignments', ['employee_id'], unique=False)
    op.create_index('ix_test_assignments_assigned_date', 'test_assignments', ['assigned_date'], unique=False)
    op.create_index('ix_test_assignments_status', 'test_assignments', ['status'], unique=False)

    op.create_table(
        'test_assignment_history',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('assignment_date', sa.Date(), nullable=False),
        sa.Column('test_id', sa.Integer(), sa.ForeignKey('tests.id'), nullable=False),
        sa.Column('assigned_employees', sa.JSON(), nullable=False),
        sa.Column('total_eligible_employees', sa.Integer(), nullable=False),
        sa.Column('assignment_method', sa.String(length=32), nullable=False, server_default='automatic'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_test_assignment_history_assignment_date', 'test_assignment_history',
                    ['assignment_date'], unique=False)
    op.create_index('ix_test_assignment_history_test_id', 'test_assignment_history', ['test_id'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_test_assignment_history_test_id', table_name='test_assignment_history')
    op.drop_index('ix_test_assignment_history_assignment_date', table_name='test_assignment_history')
    op.drop_table('test_assignment_history')

    for ix in ('ix_test_assignments_status', 'ix_test_assignments_assigned_date',
               'ix_test_assignments_employee_id', 'ix_test_assignments_test_id'):
        op.drop_index(ix, table_name='test_assignments')
    op.drop_table('test_assignments')

    op.drop_index('ix_tests_status_order', table_name='tests')
    op.drop_table('tests')

    op.drop_index('ix_leave_emp_status_range', table_name='leave_requests')
    op.drop_index('ix_leave_requests_employee_id', table_name='leave_requests')
    op.drop_table('leave_requests')

    op.drop_index('ix_emp_test_eligible', table_name='employees')
    op.drop_index('ix_emp_dept_id', table_name='employees')
    op.drop_table('employees')

    op.drop_table('departments')
