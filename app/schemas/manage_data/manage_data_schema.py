from pydantic import BaseModel
from typing import Optional, Any, Dict

class ManageDataUpdate(BaseModel):
    """Partial field map keyed by wire names, e.g. {"totalWorking": 20}"""
    fields: Dict[str, Any]
    reason: Optional[str] = None
    request_type: str = "data_change"

class ManageDataRecord(BaseModel):
    entity_kind: str
    record_id: int
    department_id: Optional[int] = None
    data: Dict[str, Any]
