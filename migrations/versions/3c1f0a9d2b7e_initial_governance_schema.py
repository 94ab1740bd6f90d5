"""initial governance schema

Revision ID: 3c1f0a9d2b7e
Revises:
Create Date: 2025-07-21 09:12:44.318205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3c1f0a9d2b7e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = sa.Enum('ADMIN', 'PLANNER', 'INPUTTER', 'VIEWER', name='userrole')
# Second use of the same type; it already exists once users is created
user_role_existing = postgresql.ENUM('ADMIN', 'PLANNER', 'INPUTTER', 'VIEWER', name='userrole', create_type=False)
approval_status = sa.Enum('PENDING', 'PENDING_ADMIN_APPROVAL', 'APPROVED', 'REJECTED', name='approvalstatus')
critical_issue_status = sa.Enum('INVESTIGASI', 'PROSES', 'SELESAI', name='criticalissuestatus')
maintenance_type = sa.Enum('PREM', 'CORM', name='maintenancetype')
kta_kpi_category = sa.Enum('KTA_TTA', 'KPI_UTAMA', name='ktakpicategory')
status_tindak_lanjut = sa.Enum('OPEN', 'CLOSE', name='statustindaklanjut')


def _audit_columns():
    return [
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('updated_by', sa.Integer(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'departments',
        *_audit_columns(),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('code', sa.String(length=20), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_index(op.f('ix_departments_id'), 'departments', ['id'], unique=False)
    op.create_index(op.f('ix_departments_code'), 'departments', ['code'], unique=True)

    op.create_table(
        'users',
        *_audit_columns(),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('department_id', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    op.create_table(
        'audit_logs',
        *_audit_columns(),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('action', sa.String(length=100), nullable=False),
        sa.Column('resource', sa.String(length=100), nullable=False),
        sa.Column('resource_id', sa.Integer(), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_audit_logs_id'), 'audit_logs', ['id'], unique=False)

    op.create_table(
        'approval_requests',
        *_audit_columns(),
        sa.Column('requester_id', sa.Integer(), nullable=False),
        sa.Column('approver_id', sa.Integer(), nullable=True),
        sa.Column('status', approval_status, nullable=False),
        sa.Column('request_type', sa.String(length=50), nullable=False),
        sa.Column('entity_kind', sa.String(length=50), nullable=False),
        sa.Column('table_name', sa.String(length=50), nullable=False),
        sa.Column('record_id', sa.Integer(), nullable=True),
        sa.Column('old_data', sa.JSON(), nullable=True),
        sa.Column('new_data', sa.JSON(), nullable=True),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('department_id', sa.Integer(), nullable=True),
        sa.Column('approver_role', user_role_existing, nullable=False),
        sa.Column('version_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_approval_requests_id'), 'approval_requests', ['id'], unique=False)
    op.create_index(op.f('ix_approval_requests_requester_id'), 'approval_requests', ['requester_id'], unique=False)
    op.create_index(op.f('ix_approval_requests_approver_id'), 'approval_requests', ['approver_id'], unique=False)
    op.create_index(op.f('ix_approval_requests_status'), 'approval_requests', ['status'], unique=False)
    op.create_index(op.f('ix_approval_requests_entity_kind'), 'approval_requests', ['entity_kind'], unique=False)
    op.create_index(op.f('ix_approval_requests_department_id'), 'approval_requests', ['department_id'], unique=False)

    op.create_table(
        'operational_reports',
        *_audit_columns(),
        sa.Column('report_date', sa.Date(), nullable=False),
        sa.Column('equipment_id', sa.Integer(), nullable=False),
        sa.Column('department_id', sa.Integer(), nullable=False),
        sa.Column('total_working', sa.Float(), nullable=False),
        sa.Column('total_standby', sa.Float(), nullable=False),
        sa.Column('total_breakdown', sa.Float(), nullable=False),
        sa.Column('shift_type', sa.String(length=20), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_complete', sa.Boolean(), nullable=True),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('report_date', 'equipment_id', name='uq_operational_report_date_equipment'),
    )
    op.create_index(op.f('ix_operational_reports_id'), 'operational_reports', ['id'], unique=False)
    op.create_index(op.f('ix_operational_reports_report_date'), 'operational_reports', ['report_date'], unique=False)
    op.create_index(op.f('ix_operational_reports_department_id'), 'operational_reports', ['department_id'], unique=False)

    op.create_table(
        'critical_issues',
        *_audit_columns(),
        sa.Column('issue_name', sa.String(length=255), nullable=False),
        sa.Column('department_id', sa.Integer(), nullable=False),
        sa.Column('status', critical_issue_status, nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_critical_issues_id'), 'critical_issues', ['id'], unique=False)
    op.create_index(op.f('ix_critical_issues_department_id'), 'critical_issues', ['department_id'], unique=False)

    op.create_table(
        'maintenance_routine',
        *_audit_columns(),
        sa.Column('unique_number', sa.String(length=50), nullable=False),
        sa.Column('job_name', sa.String(length=255), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', maintenance_type, nullable=False),
        sa.Column('department_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('unique_number'),
    )
    op.create_index(op.f('ix_maintenance_routine_id'), 'maintenance_routine', ['id'], unique=False)
    op.create_index(op.f('ix_maintenance_routine_department_id'), 'maintenance_routine', ['department_id'], unique=False)

    op.create_table(
        'kta_kpi_data',
        *_audit_columns(),
        sa.Column('no_register', sa.String(length=50), nullable=False),
        sa.Column('category', kta_kpi_category, nullable=False),
        sa.Column('npp_pelapor', sa.String(length=50), nullable=True),
        sa.Column('nama_pelapor', sa.String(length=255), nullable=True),
        sa.Column('tanggal', sa.Date(), nullable=True),
        sa.Column('lokasi', sa.String(length=255), nullable=True),
        sa.Column('area_temuan', sa.String(length=255), nullable=True),
        sa.Column('keterangan', sa.Text(), nullable=True),
        sa.Column('pic_departemen', sa.String(length=100), nullable=True),
        sa.Column('tindak_lanjut_langsung', sa.Text(), nullable=True),
        sa.Column('status_tindak_lanjut', status_tindak_lanjut, nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('no_register'),
    )
    op.create_index(op.f('ix_kta_kpi_data_id'), 'kta_kpi_data', ['id'], unique=False)

    op.create_table(
        'safety_incidents',
        *_audit_columns(),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('nearmiss', sa.Integer(), nullable=False),
        sa.Column('kec_alat', sa.Integer(), nullable=False),
        sa.Column('kec_kecil', sa.Integer(), nullable=False),
        sa.Column('kec_ringan', sa.Integer(), nullable=False),
        sa.Column('kec_berat', sa.Integer(), nullable=False),
        sa.Column('fatality', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('month', 'year', name='uq_safety_incident_month_year'),
    )
    op.create_index(op.f('ix_safety_incidents_id'), 'safety_incidents', ['id'], unique=False)

    op.create_table(
        'energy_realizations',
        *_audit_columns(),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('ikes_realization', sa.Float(), nullable=False),
        sa.Column('emission_realization', sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('year', 'month', name='uq_energy_realization_year_month'),
    )
    op.create_index(op.f('ix_energy_realizations_id'), 'energy_realizations', ['id'], unique=False)

    op.create_table(
        'energy_consumption',
        *_audit_columns(),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('tambang_consumption', sa.Float(), nullable=False),
        sa.Column('pabrik_consumption', sa.Float(), nullable=False),
        sa.Column('supporting_consumption', sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('year', 'month', name='uq_energy_consumption_year_month'),
    )
    op.create_index(op.f('ix_energy_consumption_id'), 'energy_consumption', ['id'], unique=False)


def downgrade() -> None:
    for table in (
        'energy_consumption', 'energy_realizations', 'safety_incidents', 'kta_kpi_data',
        'maintenance_routine', 'critical_issues', 'operational_reports',
        'approval_requests', 'audit_logs', 'users', 'departments',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_type in (
        status_tindak_lanjut, kta_kpi_category, maintenance_type,
        critical_issue_status, approval_status, user_role,
    ):
        enum_type.drop(bind, checkfirst=True)
