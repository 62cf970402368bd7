"""
Health check endpoints
"""
from datetime import datetime, timezone

from app.core.config import get_settings
from app.core.database import get_db
from app.core.logging_config import LoggingConfig
from app.services.contract_decorator_registry import (
    ContractDecoratorRegistry, get_contract_decorator_registry)
from app.services.contract_interface_registry import (
    ContractInterfaceRegistry, get_contract_interface_registry)
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = LoggingConfig.get_logger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    db: Session = Depends(get_db),
    decorators: ContractDecoratorRegistry = Depends(get_contract_decorator_registry),
    interfaces: ContractInterfaceRegistry = Depends(get_contract_interface_registry),
):
    """
    Health check with component status

    Returns:
        dict: Database status and number of loaded decorators and interfaces
    """
    settings = get_settings()
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.app_name,
        "environment": settings.app_env,
        "components": {
            "contractDecorators": {"status": "healthy", "count": len(decorators.get_all())},
            "contractInterfaces": {"status": "healthy", "count": len(interfaces.get_all())},
        },
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["components"]["database"] = {"status": "healthy"}
    except SQLAlchemyError as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        health_status["status"] = "unhealthy"
        health_status["components"]["database"] = {
            "status": "unhealthy",
            "error": type(e).__name__,
        }
        return JSONResponse(status_code=503, content=health_status)

    return health_status
