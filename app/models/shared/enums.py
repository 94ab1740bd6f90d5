from enum import Enum

# region Identity Enums

class UserRole(str, Enum):
    ADMIN = "ADMIN"
    PLANNER = "PLANNER"
    INPUTTER = "INPUTTER"
    VIEWER = "VIEWER"

# endregion

# region Operational Data Enums

class StatusTindakLanjut(str, Enum):
    OPEN = "OPEN"
    CLOSE = "CLOSE"

class CriticalIssueStatus(str, Enum):
    INVESTIGASI = "INVESTIGASI"
    PROSES = "PROSES"
    SELESAI = "SELESAI"

class MaintenanceType(str, Enum):
    PREM = "PREM"      # Preventive maintenance
    CORM = "CORM"      # Corrective maintenance

class KtaKpiCategory(str, Enum):
    KTA_TTA = "KTA_TTA"
    KPI_UTAMA = "KPI_UTAMA"

# endregion

# region Governance Enums

class FieldType(str, Enum):
    DATE = "date"
    ENUM = "enum"
    NUMBER = "number"
    STRING = "string"
    BOOL = "bool"

class MutationOperation(str, Enum):
    UPDATE = "UPDATE"
    DELETE = "DELETE"

class MutationClass(str, Enum):
    DIRECT = "DIRECT"
    VIA_REQUEST = "VIA_REQUEST"
    DENIED = "DENIED"

class ApprovalStatus(str, Enum):
    PENDING = "PENDING"
    PENDING_ADMIN_APPROVAL = "PENDING_ADMIN_APPROVAL"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

class ApprovalDecision(str, Enum):
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

class ApprovalRequestType(str, Enum):
    """Known request types. The column is free-form; these are the ones the engine acts on."""
    DATA_CHANGE = "data_change"
    DATA_DELETION = "data_deletion"
    EQUIPMENT_STATUS_CHANGE = "equipment_status_change"
    MAINTENANCE_SCHEDULE_CHANGE = "maintenance_schedule_change"
    CROSS_DEPARTMENT_CHANGE = "cross_department_change"

class AuditAction(str, Enum):
    DIRECT_UPDATE = "DIRECT_UPDATE"
    DIRECT_DELETE = "DIRECT_DELETE"
    REQUEST_CREATED = "REQUEST_CREATED"
    REQUEST_APPROVED = "REQUEST_APPROVED"
    REQUEST_REJECTED = "REQUEST_REJECTED"

OPEN_APPROVAL_STATUSES = (ApprovalStatus.PENDING, ApprovalStatus.PENDING_ADMIN_APPROVAL)

# endregion
