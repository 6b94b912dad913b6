import logging

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.dependencies import get_db
from app.endpoints import comercial, cron, delays, kanban, onboarding

logging.basicConfig(level=logging.INFO)

logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)

ch = logging.StreamHandler()
ch.setLevel(logging.DEBUG)

formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
ch.setFormatter(formatter)

logger.addHandler(ch)

logger.info("Application started and logger configured.")


app = FastAPI(
    title="Agency Ops API",
    description="Client onboarding automation, sales pipeline and kanban triggers",
    version="1.0.0"
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(onboarding.router)
app.include_router(comercial.router)
app.include_router(delays.router)
app.include_router(kanban.router)
app.include_router(cron.router)


@app.get("/")
def read_root():
    return {"message": "Welcome to Agency Ops API"}


@app.get("/healthz")
async def healthz():
    return {"message": "Healthy!"}


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        if 'ctx' in error and 'error' in error['ctx']:
            # Surface the ValueError message raised by our validators
            if isinstance(error['ctx']['error'], ValueError):
                error['msg'] = str(error['ctx']['error'])
                del error['ctx']
        errors.append(error)

    return JSONResponse(
        status_code=422,
        content={"detail": errors},
    )


# A concurrent request created the same row first; the whole operation was rolled back
@app.exception_handler(IntegrityError)
async def integrity_exception_handler(request: Request, exc: IntegrityError):
    logger.warning(f"Integrity conflict on {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=409,
        content={"detail": "Conflicting concurrent update, please retry"},
    )


@app.exception_handler(SQLAlchemyError)
async def store_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Database error"},
    )


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        logging.error(f"Health check failed: {str(e)}")
        return {"status": "unhealthy", "database": "disconnected"}
