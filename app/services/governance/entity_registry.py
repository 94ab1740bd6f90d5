"""
Entity registry for governed operational data.

Each record kind that can be changed through the manage-data / approval
pathway is described once here: its ORM model, the fields that may be
mutated, how raw JSON values are coerced, and how to look up the
department that owns a record. Callers pick a kind with ``resolve()``
and then use the uniform capability methods on ``EntityKind`` instead of
branching on kind names.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Type

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConfigurationError, NotFoundError, ValidationError
from app.db.base import BaseModel
from app.models.energy.energy_consumption import EnergyConsumption
from app.models.energy.energy_realization import EnergyRealization
from app.models.operations.critical_issue import CriticalIssue
from app.models.operations.maintenance_routine import MaintenanceRoutine
from app.models.operations.operational_report import OperationalReport
from app.models.organization.department import Department
from app.models.safety.kta_kpi_data import KtaKpiData
from app.models.safety.safety_incident import SafetyIncident
from app.models.shared.enums import (
    CriticalIssueStatus, FieldType, MaintenanceType, StatusTindakLanjut
)
from app.utils.date_time_serializer import serialize_dates
from app.utils.validators.field_coercion import coerce_field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldSpec:
    name: str                  # Wire name used in JSON field maps
    attr: str                  # ORM attribute
    type: FieldType
    nullable: bool = True
    choices: Tuple[str, ...] = ()
    integer: bool = False

    def coerce(self, value: Any) -> Any:
        return coerce_field(
            self.name, self.type, value,
            nullable=self.nullable, choices=self.choices, integer=self.integer
        )


DepartmentResolver = Callable[[AsyncSession, int], Awaitable[Optional[int]]]
CreateBuilder = Callable[[AsyncSession, Dict[str, Any], Optional[int]], Awaitable[BaseModel]]


@dataclass(frozen=True)
class EntityKind:
    name: str
    label: str
    model: Type[BaseModel]
    fields: Tuple[FieldSpec, ...]
    department_resolver: Optional[DepartmentResolver] = None
    create_builder: Optional[CreateBuilder] = None

    @property
    def table_name(self) -> str:
        return self.model.__tablename__

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    @property
    def has_department(self) -> bool:
        return self.department_resolver is not None

    @property
    def supports_create(self) -> bool:
        return self.create_builder is not None

    def field(self, name: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    def coerce(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Coerce a wire field map into {attr: value}; keys outside the mutable set are dropped"""
        coerced = {}
        for key, value in (fields or {}).items():
            spec = self.field(key)
            if spec is None:
                continue
            coerced[spec.attr] = spec.coerce(value)
        return coerced

    def snapshot(self, row: BaseModel) -> Dict[str, Any]:
        """Mutable-field view of a row, JSON-safe"""
        return serialize_dates({spec.name: getattr(row, spec.attr) for spec in self.fields})

    def to_dict(self, row: BaseModel) -> Dict[str, Any]:
        """Full row, JSON-safe, for API responses"""
        return serialize_dates({
            column.key: getattr(row, column.key) for column in self.model.__table__.columns
        })

    async def get_row(self, session: AsyncSession, record_id: int, for_update: bool = False) -> BaseModel:
        query = select(self.model).where(self.model.id == record_id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await session.execute(query)
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundError(f"{self.label} {record_id} not found")
        return row

    async def lookup(self, session: AsyncSession, record_id: int) -> Dict[str, Any]:
        row = await self.get_row(session, record_id)
        return self.snapshot(row)

    async def apply_update(
        self,
        session: AsyncSession,
        record_id: int,
        fields: Dict[str, Any],
        actor_id: Optional[int] = None,
    ) -> BaseModel:
        values = self.coerce(fields)
        row = await self.get_row(session, record_id, for_update=True)
        for attr, value in values.items():
            setattr(row, attr, value)
        if actor_id is not None:
            row.updated_by = actor_id
        await session.flush()
        return row

    async def apply_delete(self, session: AsyncSession, record_id: int) -> None:
        row = await self.get_row(session, record_id, for_update=True)
        await session.delete(row)
        await session.flush()

    async def department_of(self, session: AsyncSession, record_id: int) -> Optional[int]:
        if self.department_resolver is None:
            return None
        return await self.department_resolver(session, record_id)

    async def create(
        self,
        session: AsyncSession,
        fields: Dict[str, Any],
        department_id: Optional[int],
        actor_id: Optional[int] = None,
    ) -> BaseModel:
        if self.create_builder is None:
            raise ValidationError(f"{self.label} records cannot be created through an approval request")
        row = await self.create_builder(session, fields, department_id)
        row.created_by = actor_id
        session.add(row)
        await session.flush()
        return row


# region ========== Department resolvers ==========

def _department_column_resolver(model: Type[BaseModel]) -> DepartmentResolver:
    async def resolve_department(session: AsyncSession, record_id: int) -> Optional[int]:
        result = await session.execute(
            select(model.id, model.department_id).where(model.id == record_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundError(f"{model.__tablename__} record {record_id} not found")
        return row.department_id
    return resolve_department


async def _kta_pic_department(session: AsyncSession, record_id: int) -> Optional[int]:
    result = await session.execute(
        select(KtaKpiData.id, KtaKpiData.pic_departemen).where(KtaKpiData.id == record_id)
    )
    row = result.one_or_none()
    if row is None:
        raise NotFoundError(f"kta_kpi_data record {record_id} not found")
    if not row.pic_departemen:
        return None

    pic = row.pic_departemen.strip()
    dept_result = await session.execute(
        select(Department.id).where(
            or_(Department.code == pic.upper(), Department.name == pic)
        ).limit(1)
    )
    return dept_result.scalar_one_or_none()

# endregion


# region ========== Create builders ==========

async def _require_department(session: AsyncSession, department_id: Optional[int]) -> Department:
    if department_id is None:
        raise ValidationError("a department is required to create this record", field="departmentId")
    department = await session.get(Department, department_id)
    if department is None:
        raise NotFoundError(f"Department {department_id} not found")
    return department


def _require(values: Dict[str, Any], attr: str, field: str) -> None:
    if values.get(attr) in (None, ""):
        raise ValidationError("is required", field=field)


async def _build_maintenance_routine(
    session: AsyncSession, fields: Dict[str, Any], department_id: Optional[int]
) -> MaintenanceRoutine:
    kind = ENTITY_REGISTRY["maintenance_routine"]
    values = kind.coerce(fields)
    _require(values, "job_name", "jobName")
    _require(values, "start_date", "startDate")
    department = await _require_department(session, department_id)

    # Unique number: <DEPT>-<ddmmyyyy>-<seq>
    prefix = f"{department.code}-{date.today().strftime('%d%m%Y')}-"
    count = await session.scalar(
        select(func.count(MaintenanceRoutine.id)).where(
            MaintenanceRoutine.unique_number.like(f"{prefix}%")
        )
    )
    return MaintenanceRoutine(
        unique_number=f"{prefix}{(count or 0) + 1:03d}",
        type=MaintenanceType.PREM,
        department_id=department.id,
        **values,
    )


async def _build_critical_issue(
    session: AsyncSession, fields: Dict[str, Any], department_id: Optional[int]
) -> CriticalIssue:
    kind = ENTITY_REGISTRY["critical_issue"]
    values = kind.coerce(fields)
    _require(values, "issue_name", "issueName")
    department = await _require_department(session, department_id)
    values.setdefault("status", CriticalIssueStatus.INVESTIGASI.value)
    return CriticalIssue(department_id=department.id, **values)

# endregion


def _number(name: str, attr: str, integer: bool = False) -> FieldSpec:
    return FieldSpec(name, attr, FieldType.NUMBER, nullable=False, integer=integer)


def _text(name: str, attr: str, nullable: bool = True) -> FieldSpec:
    return FieldSpec(name, attr, FieldType.STRING, nullable=nullable)


ENTITY_REGISTRY: Dict[str, EntityKind] = {
    kind.name: kind for kind in (
        EntityKind(
            name="operational_report",
            label="Operational report",
            model=OperationalReport,
            fields=(
                _number("totalWorking", "total_working"),
                _number("totalStandby", "total_standby"),
                _number("totalBreakdown", "total_breakdown"),
                _text("shiftType", "shift_type"),
                _text("notes", "notes"),
                FieldSpec("isComplete", "is_complete", FieldType.BOOL),
            ),
            department_resolver=_department_column_resolver(OperationalReport),
        ),
        EntityKind(
            name="kta_tta",
            label="KTA/TTA report",
            model=KtaKpiData,
            fields=(
                _text("namaPelapor", "nama_pelapor"),
                _text("lokasi", "lokasi"),
                _text("keterangan", "keterangan"),
                FieldSpec(
                    "statusTindakLanjut", "status_tindak_lanjut", FieldType.ENUM,
                    nullable=False, choices=tuple(s.value for s in StatusTindakLanjut)
                ),
                _text("picDepartemen", "pic_departemen"),
                FieldSpec("dueDate", "due_date", FieldType.DATE),
                _text("tindakLanjutLangsung", "tindak_lanjut_langsung"),
            ),
            department_resolver=_kta_pic_department,
        ),
        EntityKind(
            name="critical_issue",
            label="Critical issue",
            model=CriticalIssue,
            fields=(
                _text("issueName", "issue_name", nullable=False),
                FieldSpec(
                    "status", "status", FieldType.ENUM,
                    nullable=False, choices=tuple(s.value for s in CriticalIssueStatus)
                ),
                _text("description", "description"),
            ),
            department_resolver=_department_column_resolver(CriticalIssue),
            create_builder=_build_critical_issue,
        ),
        EntityKind(
            name="maintenance_routine",
            label="Maintenance routine",
            model=MaintenanceRoutine,
            fields=(
                _text("jobName", "job_name", nullable=False),
                FieldSpec("startDate", "start_date", FieldType.DATE, nullable=False),
                FieldSpec("endDate", "end_date", FieldType.DATE),
                _text("description", "description"),
            ),
            department_resolver=_department_column_resolver(MaintenanceRoutine),
            create_builder=_build_maintenance_routine,
        ),
        EntityKind(
            name="safety_incident",
            label="Safety incident",
            model=SafetyIncident,
            fields=(
                _number("nearmiss", "nearmiss", integer=True),
                _number("kecAlat", "kec_alat", integer=True),
                _number("kecKecil", "kec_kecil", integer=True),
                _number("kecRingan", "kec_ringan", integer=True),
                _number("kecBerat", "kec_berat", integer=True),
                _number("fatality", "fatality", integer=True),
            ),
        ),
        EntityKind(
            name="energy_realization",
            label="Energy realization",
            model=EnergyRealization,
            fields=(
                _number("ikesRealization", "ikes_realization"),
                _number("emissionRealization", "emission_realization"),
            ),
        ),
        EntityKind(
            name="energy_consumption",
            label="Energy consumption",
            model=EnergyConsumption,
            fields=(
                _number("tambangConsumption", "tambang_consumption"),
                _number("pabrikConsumption", "pabrik_consumption"),
                _number("supportingConsumption", "supporting_consumption"),
            ),
        ),
    )
}


def resolve(entity_kind_name: str) -> EntityKind:
    """Return the registered kind or fail with ConfigurationError"""
    kind = ENTITY_REGISTRY.get(entity_kind_name)
    if kind is None:
        logger.error(f"Unknown entity kind requested: {entity_kind_name}")
        raise ConfigurationError(f"Unknown entity kind: {entity_kind_name}")
    return kind
