"""
Health check endpoints
Used by the hosting platform + ops
"""

import logging

from fastapi import APIRouter
from sqlalchemy.exc import SQLAlchemyError

from postcraft.db import check_db_connection
from postcraft.errors import ConfigurationError

router = APIRouter(prefix="/health", tags=["health"])
logger = logging.getLogger("health")


@router.get("")
def health_check():
    return {"status": "healthy"}


@router.get("/db")
def db_health_check():
    try:
        check_db_connection()
        return {"database": "healthy"}
    except (SQLAlchemyError, ConfigurationError) as e:
        logger.warning("Database health check failed: %s", e)
        return {"database": "unhealthy", "error": str(e)}
