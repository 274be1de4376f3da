"""Database bootstrap and health routes."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from job_board.config import get_config
from job_board.errors import Forbidden
from job_board.storage.database import init_database, is_database_initialized, seed_sample_data

from .dependencies import get_db

logger = logging.getLogger("job_board.web")

router = APIRouter()


@router.post("/api/init-db")
def init_db(db: Session = Depends(get_db)):
    """Create the schema and seed demo data (not available in production)."""
    config = get_config()
    if config.environment == "production":
        raise Forbidden("Database bootstrap is disabled in production")

    init_database(db.get_bind())
    seeded = seed_sample_data(db, rounds=config.security.bcrypt_rounds)
    return {"success": True, "seeded": seeded}


@router.get("/api/check-db-status")
def check_db_status(db: Session = Depends(get_db)):
    try:
        initialized = is_database_initialized(db.get_bind())
    except SQLAlchemyError:
        logger.error("Failed to check database status", exc_info=True)
        return JSONResponse(
            {"initialized": False, "error": "Failed to check database status"},
            status_code=500,
        )
    return {"initialized": initialized}


@router.get("/health")
def health(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"status": "ok"}
