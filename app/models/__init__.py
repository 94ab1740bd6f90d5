from app.models.auth.audit_log import AuditLog
from app.models.auth.user import User
from app.models.organization.department import Department
from app.models.approval.approval_request import ApprovalRequest
from app.models.operations.operational_report import OperationalReport
from app.models.operations.critical_issue import CriticalIssue
from app.models.operations.maintenance_routine import MaintenanceRoutine
from app.models.safety.kta_kpi_data import KtaKpiData
from app.models.safety.safety_incident import SafetyIncident
from app.models.energy.energy_realization import EnergyRealization
from app.models.energy.energy_consumption import EnergyConsumption
