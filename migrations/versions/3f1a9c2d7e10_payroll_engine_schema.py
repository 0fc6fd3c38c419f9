"""payroll engine schema

Revision ID: 3f1a9c2d7e10
Revises:
Create Date: 2026-10-17 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _money(name):
    return sa.Column(name, sa.Numeric(14, 2), nullable=True)


def _days(name):
    return sa.Column(name, sa.Numeric(6, 2), nullable=True)


def upgrade() -> None:
    op.create_table(
        'posts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=120), nullable=False),
        sa.Column('payroll_type', sa.String(length=40), nullable=True),
        sa.Column('is_pf_payable', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_esi_payable', sa.Boolean(), nullable=False, server_default=sa.false()),
        _money('salary_basic'),
        _money('house_rent_allowance'),
        _money('dearness_allowance'),
        _money('perquisites'),
        _money('others'),
        _money('bonus'),
        _money('variable_pay'),
        _money('taxes'),
        _money('salary_gross'),
        _money('salary_total'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_posts_title', 'posts', ['title'])

    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('post_id', sa.Integer(), sa.ForeignKey('posts.id', ondelete='RESTRICT'), nullable=True),
        sa.Column('code', sa.String(length=32), nullable=False, unique=True),
        sa.Column('first_name', sa.String(length=80), nullable=False),
        sa.Column('last_name', sa.String(length=80), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True, unique=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='Active'),
        sa.Column('date_of_joining', sa.Date(), nullable=True),
        sa.Column('last_working_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_employees_post_id', 'employees', ['post_id'])

    op.create_table(
        'leave_types',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(length=20), nullable=False, unique=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('is_paid', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('total_leaves', sa.Numeric(5, 2), nullable=False, server_default='0'),
        sa.Column('carry_forward', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('validity_days', sa.Integer(), nullable=False, server_default='365'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'leave_balances',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('leave_type_id', sa.Integer(), sa.ForeignKey('leave_types.id', ondelete='CASCADE'), nullable=False),
        sa.Column('used', sa.Numeric(5, 2), nullable=False, server_default='0'),
        sa.Column('remaining', sa.Numeric(5, 2), nullable=False, server_default='0'),
        sa.Column('last_refreshed', sa.Date(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('employee_id', 'leave_type_id', name='uq_leave_balance_emp_type'),
    )
    op.create_index('ix_leave_balances_employee_id', 'leave_balances', ['employee_id'])
    op.create_index('ix_leave_balances_leave_type_id', 'leave_balances', ['leave_type_id'])

    op.create_table(
        'holidays',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False, server_default='National'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('date', 'name', name='uq_holiday_date_name'),
    )
    op.create_index('ix_holidays_date', 'holidays', ['date'])

    op.create_table(
        'attendance_records',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('work_date', sa.Date(), nullable=False),
        sa.Column('punch_in', sa.DateTime(), nullable=True),
        sa.Column('punch_out', sa.DateTime(), nullable=True),
        sa.Column('is_leave', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('leave_type_id', sa.Integer(), sa.ForeignKey('leave_types.id', ondelete='SET NULL'), nullable=True),
        sa.Column('attendance_percentage', sa.Numeric(5, 2), nullable=False, server_default='0'),
        sa.Column('month', sa.String(length=7), nullable=False),
        sa.Column('week', sa.String(length=4), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('employee_id', 'work_date', name='uq_attendance_emp_date'),
    )
    op.create_index('ix_attendance_records_employee_id', 'attendance_records', ['employee_id'])
    op.create_index('ix_attendance_records_month', 'attendance_records', ['month'])
    op.create_index('ix_attendance_records_week', 'attendance_records', ['week'])

    op.create_table(
        'payroll_records',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('period_key', sa.String(length=7), nullable=False),
        sa.Column('type', sa.String(length=10), nullable=False, server_default='Monthly'),
        _days('working_days'),
        _days('present_days'),
        _days('paid_leave_days'),
        _days('unpaid_leave'),
        _days('absent'),
        _days('holidays'),
        _days('total_days_payable'),
        _days('total_days_non_payable'),
        _days('attendance_percentage'),
        _money('basic_salary'),
        _money('house_rent_allowance'),
        _money('dearness_allowance'),
        _money('perquisites'),
        _money('others'),
        _money('bonus'),
        _money('variable_pay'),
        _money('gross_salary'),
        _money('epf_employer'),
        _money('esi_employer'),
        _money('epf_employee'),
        _money('esi_employee'),
        _money('taxes'),
        _money('total_deductions'),
        _money('net_salary'),
        sa.Column('status', sa.String(length=12), nullable=False, server_default='draft'),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('processed_at', sa.DateTime(), nullable=True),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        sa.Column('last_modified_by', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('employee_id', 'period_key', name='uq_payroll_employee_period'),
    )
    op.create_index('ix_payroll_records_employee_id', 'payroll_records', ['employee_id'])
    op.create_index('ix_payroll_records_period_key', 'payroll_records', ['period_key'])
    op.create_index('ix_payroll_status', 'payroll_records', ['status'])


def downgrade() -> None:
    op.drop_table('payroll_records')
    op.drop_table('attendance_records')
    op.drop_table('holidays')
    op.drop_table('leave_balances')
    op.drop_table('leave_types')
    op.drop_table('employees')
    op.drop_table('posts')
