"""
Main FastAPI application entry point
"""
from contextlib import asynccontextmanager

from app.api.routes import (contract_interfaces, deployable_contracts, health,
                            imported_contracts, metrics)
from app.core.config import get_settings
from app.core.exceptions import ServiceError
from app.core.logging_config import LoggingConfig
from app.core.middleware import LoggingContextMiddleware
from app.services.contract_decorator_loader import ContractDecoratorLoader
from app.services.contract_decorator_registry import \
    get_contract_decorator_registry
from app.services.contract_interface_registry import \
    get_contract_interface_registry
from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException as FastAPIHTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Configure logging first
LoggingConfig.configure()

logger = LoggingConfig.get_logger(__name__)


def create_loader() -> ContractDecoratorLoader:
    """Loader for the configured decorator and interface directories"""
    settings = get_settings()
    return ContractDecoratorLoader(
        decorator_registry=get_contract_decorator_registry(),
        interface_registry=get_contract_interface_registry(),
        contracts_root=settings.contract_decorators_root,
        interfaces_root=settings.contract_interfaces_root,
        ignored_dirs=settings.ignored_dirs_list,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for FastAPI app"""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode...")

    create_loader().reload()

    yield

    logger.info(f"Shutting down {settings.app_name}...")


_settings = get_settings()
app = FastAPI(
    title=_settings.app_name,
    description="Contract decorators, contract interfaces and imported contracts",
    version="0.1.0",
    lifespan=lifespan,
)

# Add logging context middleware (before CORS to capture all requests)
app.add_middleware(LoggingContextMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Map service errors to their HTTP status and error code"""
    logger.warning(
        exc.message,
        extra={
            "error_code": exc.error_code.value,
            "path": request.url.path,
            "method": request.method,
        }
    )
    return JSONResponse(
        status_code=exc.http_status,
        content={"errorCode": exc.error_code.value, "message": exc.message},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to log all unhandled errors"""
    # Don't handle HTTPException - let FastAPI handle it
    if isinstance(exc, FastAPIHTTPException):
        raise exc

    logger.error(
        "Unhandled exception",
        exc_info=True,
        extra={
            "error": str(exc),
            "error_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method,
        }
    )

    return JSONResponse(
        status_code=500,
        content={
            "errorCode": "INTERNAL_ERROR",
            "message": "Internal server error",
        }
    )


# Include routers
app.include_router(health.router)
app.include_router(metrics.router)
app.include_router(deployable_contracts.router)
app.include_router(contract_interfaces.router)
app.include_router(imported_contracts.router)


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.app_env == "development",
    )
