from typing import Optional

from pydantic import BaseModel

from app.models.client import ComercialStatus
from app.models.comercial_task import ComercialAutoTaskType


class ComercialTaskCompleteRequest(BaseModel):
    manager_id: Optional[int] = None
    manager_name: Optional[str] = None


class ComercialAdvancementResult(BaseModel):
    task_id: int
    task_type: Optional[ComercialAutoTaskType] = None
    client_id: Optional[int] = None
    task_completed: bool = True
    already_completed: bool = False
    comercial_status: Optional[ComercialStatus] = None
    task_created: bool = False
    tracking_created: bool = False
