import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.auth.permissions import get_current_user
from app.dependencies import get_db
from app.errors.client_errors import ClientNotFound
from app.errors.comercial_errors import ComercialTaskNotFound
from app.schemas.comercial import ComercialAdvancementResult, ComercialTaskCompleteRequest
from app.services.comercial import ComercialAutomationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comercial", tags=["Comercial"])

COMERCIAL_ROLES = ["ceo", "gestor_projetos", "consultor_comercial", "gestor_crm"]


@router.post("/tasks/{task_id}/complete", response_model=ComercialAdvancementResult)
def complete_comercial_task(
    task_id: int,
    data: Optional[ComercialTaskCompleteRequest] = None,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user(COMERCIAL_ROLES)),
):
    """
    Completes a sales task. For "Realizar Consultoria", pass the ads manager
    in the body to place the client on the caller's tracking board.
    """
    data = data or ComercialTaskCompleteRequest()
    service = ComercialAutomationService(db)
    try:
        return service.complete_comercial_task(
            task_id,
            acting_user_id=current_user["id"],
            manager_id=data.manager_id,
            manager_name=data.manager_name,
        )
    except ComercialTaskNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ClientNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/clients/{client_id}/initial-task")
def create_marcar_consultoria_task(
    client_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user(COMERCIAL_ROLES)),
):
    service = ComercialAutomationService(db)
    try:
        created = service.create_marcar_consultoria_task(client_id, acting_user_id=current_user["id"])
    except ClientNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"created": created}
