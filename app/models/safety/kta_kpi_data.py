from sqlalchemy import Column, String, Text, Date, Enum as SQLEnum
from app.db.base import BaseModel
from app.models.shared.enums import StatusTindakLanjut, KtaKpiCategory

class KtaKpiData(BaseModel):
    """KTA/TTA (unsafe condition / unsafe act) findings and KPI utama entries."""
    __tablename__ = 'kta_kpi_data'

    no_register = Column(String(50), nullable=False, unique=True)
    category = Column(SQLEnum(KtaKpiCategory), nullable=False, default=KtaKpiCategory.KTA_TTA)
    npp_pelapor = Column(String(50))
    nama_pelapor = Column(String(255))
    tanggal = Column(Date)
    lokasi = Column(String(255))
    area_temuan = Column(String(255))
    keterangan = Column(Text)
    pic_departemen = Column(String(100))  # Department code or name of the person in charge
    tindak_lanjut_langsung = Column(Text)
    status_tindak_lanjut = Column(SQLEnum(StatusTindakLanjut), default=StatusTindakLanjut.OPEN)
    due_date = Column(Date)
