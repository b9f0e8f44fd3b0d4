"""Create users, customers, estimates, invoices, employees, jobs, time entries and leads

Revision ID: 001_create_core_tables
Revises:
Create Date: 2025-01-06

Note: Using IF NOT EXISTS pattern so the migration can run against a database
that was bootstrapped by init_db().
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy import text

# revision identifiers, used by Alembic.
revision = '001_create_core_tables'
down_revision = None
branch_labels = None
depends_on = None


def table_exists(conn, table_name):
    """Check if a table exists in the database."""
    result = conn.execute(text(
        "SELECT EXISTS (SELECT FROM information_schema.tables WHERE table_name = :table_name)"
    ), {"table_name": table_name})
    return result.scalar()


def _line_item_columns(parent_fk):
    return [
        sa.Column('id', sa.String(36), primary_key=True),
        parent_fk,
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('description', sa.String(255), nullable=False),
        sa.Column('qty', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('unit_price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('metadata', sa.JSON(), nullable=True),
    ]


def upgrade():
    conn = op.get_bind()

    if not table_exists(conn, 'users'):
        op.create_table(
            'users',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('email', sa.String(255), nullable=False, unique=True, index=True),
            sa.Column('hashed_password', sa.String(255), nullable=False),
            sa.Column('name', sa.String(200)),
            sa.Column('role', sa.String(20), nullable=False, server_default='ADMIN'),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
            sa.Column('updated_at', sa.DateTime(timezone=True)),
        )

    if not table_exists(conn, 'customers'):
        op.create_table(
            'customers',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('email', sa.String(255), nullable=False, unique=True, index=True),
            sa.Column('name', sa.String(200), nullable=False),
            sa.Column('phone', sa.String(50), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
            sa.Column('updated_at', sa.DateTime(timezone=True)),
        )

    if not table_exists(conn, 'estimates'):
        op.create_table(
            'estimates',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('number', sa.String(20), nullable=False, unique=True, index=True),
            sa.Column('status', sa.String(20), nullable=False, server_default='DRAFT', index=True),
            sa.Column('moving_date', sa.Date(), nullable=False),
            sa.Column('customer_id', sa.String(36), sa.ForeignKey('customers.id'), nullable=False, index=True),
            # Customer snapshot
            sa.Column('customer_name', sa.String(200), nullable=False),
            sa.Column('customer_phone', sa.String(50), nullable=False),
            sa.Column('customer_email', sa.String(255), nullable=False),
            sa.Column('customer_job_address', sa.String(500), nullable=False),
            # Totals
            sa.Column('currency_symbol', sa.String(8), nullable=False),
            sa.Column('subtotal', sa.Float(), nullable=False, server_default='0'),
            sa.Column('tax', sa.Float(), nullable=False, server_default='0'),
            sa.Column('total', sa.Float(), nullable=False, server_default='0'),
            sa.Column('notes', sa.Text()),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        )
        op.create_index('idx_estimates_customer_name', 'estimates', ['customer_name'])
        op.create_index('idx_estimates_created_at', 'estimates', ['created_at'])
        print("Created estimates table")

    if not table_exists(conn, 'estimate_line_items'):
        op.create_table(
            'estimate_line_items',
            *_line_item_columns(
                sa.Column('estimate_id', sa.String(36), sa.ForeignKey('estimates.id', ondelete='CASCADE'),
                          nullable=False, index=True)
            ),
        )

    if not table_exists(conn, 'invoices'):
        op.create_table(
            'invoices',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('number', sa.String(20), nullable=False, unique=True, index=True),
            sa.Column('status', sa.String(20), nullable=False, server_default='DRAFT', index=True),
            sa.Column('derived_from_estimate_id', sa.String(36),
                      sa.ForeignKey('estimates.id', ondelete='SET NULL'), nullable=True, unique=True),
            sa.Column('customer_name', sa.String(200), nullable=False),
            sa.Column('customer_phone', sa.String(50), nullable=False),
            sa.Column('customer_email', sa.String(255), nullable=False),
            sa.Column('customer_job_address', sa.String(500), nullable=False),
            sa.Column('currency_symbol', sa.String(8), nullable=False),
            sa.Column('subtotal', sa.Float(), nullable=False, server_default='0'),
            sa.Column('tax', sa.Float(), nullable=False, server_default='0'),
            sa.Column('total', sa.Float(), nullable=False, server_default='0'),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        )
        print("Created invoices table")

    if not table_exists(conn, 'invoice_line_items'):
        op.create_table(
            'invoice_line_items',
            *_line_item_columns(
                sa.Column('invoice_id', sa.String(36), sa.ForeignKey('invoices.id', ondelete='CASCADE'),
                          nullable=False, index=True)
            ),
        )

    if not table_exists(conn, 'employees'):
        op.create_table(
            'employees',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('name', sa.String(200), nullable=False),
            sa.Column('phone', sa.String(50), nullable=False),
            sa.Column('role', sa.String(20), nullable=False, server_default='EMPLOYEE'),
            sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL'),
                      nullable=True, unique=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
            sa.Column('updated_at', sa.DateTime(timezone=True)),
        )

    if not table_exists(conn, 'jobs'):
        op.create_table(
            'jobs',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('title', sa.String(255), nullable=False),
            sa.Column('address', sa.String(500), nullable=False),
            sa.Column('start_datetime', sa.DateTime(timezone=True), nullable=False, index=True),
            sa.Column('end_datetime', sa.DateTime(timezone=True), nullable=False),
            sa.Column('estimate_id', sa.String(36), sa.ForeignKey('estimates.id', ondelete='SET NULL'),
                      nullable=True, index=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
            sa.Column('updated_at', sa.DateTime(timezone=True)),
        )

    if not table_exists(conn, 'job_assignments'):
        op.create_table(
            'job_assignments',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('job_id', sa.String(36), sa.ForeignKey('jobs.id', ondelete='CASCADE'),
                      nullable=False, index=True),
            sa.Column('employee_id', sa.String(36), sa.ForeignKey('employees.id', ondelete='CASCADE'),
                      nullable=False, index=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
            sa.UniqueConstraint('job_id', 'employee_id', name='uq_job_assignment_employee'),
        )

    if not table_exists(conn, 'time_entries'):
        op.create_table(
            'time_entries',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('employee_id', sa.String(36), sa.ForeignKey('employees.id', ondelete='CASCADE'),
                      nullable=False),
            sa.Column('clock_in', sa.DateTime(timezone=True), nullable=False),
            sa.Column('clock_out', sa.DateTime(timezone=True), nullable=True),
            sa.Column('duration_minutes', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        )
        op.create_index('idx_time_entries_employee_clock_in', 'time_entries', ['employee_id', 'clock_in'])
        # At most one open entry per employee
        op.create_index(
            'uq_time_entries_open_per_employee',
            'time_entries',
            ['employee_id'],
            unique=True,
            postgresql_where=text('clock_out IS NULL'),
        )
        print("Created time_entries table")

    if not table_exists(conn, 'leads'):
        op.create_table(
            'leads',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('name', sa.String(200), nullable=False),
            sa.Column('email', sa.String(255), nullable=False),
            sa.Column('phone', sa.String(50), nullable=False),
            sa.Column('message', sa.Text(), nullable=False),
            sa.Column('source', sa.String(30), nullable=False, server_default='CONTACT'),
            sa.Column('job_address', sa.String(500)),
            sa.Column('moving_date', sa.Date()),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), index=True),
        )


def downgrade():
    for table_name in (
        'leads',
        'time_entries',
        'job_assignments',
        'jobs',
        'employees',
        'invoice_line_items',
        'invoices',
        'estimate_line_items',
        'estimates',
        'customers',
        'users',
    ):
        op.drop_table(table_name)
