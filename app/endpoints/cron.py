import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.security import verify_api_key
from app.dependencies import get_db
from app.services.comercial import ComercialAutomationService
from app.services.delay_detection import DelayDetectionService
from app.services.onboarding import OnboardingAutomationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cron", tags=["cron"])


@router.post("/detect-delays", dependencies=[Depends(verify_api_key)])
def detect_delays_endpoint(db: Session = Depends(get_db)):
    """
    Scans the sales pipeline for SLA breaches (novo > 24h, onboarding > 5 days)
    and raises one notification per (consultant, type, client).
    Protected by API key (X-API-Key). Meant to be called by a scheduler every few minutes.
    """
    try:
        result = DelayDetectionService(db).scan()
        return {
            "message": "Delay scan completed",
            "created": result.created,
            "result": result.model_dump(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    except SQLAlchemyError:
        # mapped by the app-level handlers
        raise
    except Exception as e:
        logger.error(f"Error in detect-delays: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/create-initial-tasks", dependencies=[Depends(verify_api_key)])
def create_initial_tasks_endpoint(db: Session = Depends(get_db)):
    """
    Opens the first task of each pipeline for clients that don't have it yet:
    "Marcar call 1" for new_client clients and "Marcar Consultoria" for novo clients.
    """
    try:
        onboarding = OnboardingAutomationService(db).ensure_initial_tasks_for_new_clients()
        comercial = ComercialAutomationService(db).ensure_tasks_for_new_clients()
        return {
            "message": "Initial tasks ensured",
            "onboarding": onboarding.model_dump(),
            "comercial": comercial.model_dump(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    except SQLAlchemyError:
        # mapped by the app-level handlers
        raise
    except Exception as e:
        logger.error(f"Error in create-initial-tasks: {e}")
        raise HTTPException(status_code=500, detail=str(e))
