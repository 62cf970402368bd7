"""
Pytest configuration and fixtures
"""
import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))
# Shared test data builders live next to this file
tests_dir = Path(__file__).parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

# Never reach a real database or decorator directories from tests
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite://"
os.environ.pop("CONTRACT_DECORATORS_ROOT", None)
os.environ.pop("CONTRACT_INTERFACES_ROOT", None)

from app.core.database import Base
from app.services.contract_decorator_registry import ContractDecoratorRegistry
from app.services.contract_interface_registry import ContractInterfaceRegistry


@pytest.fixture(scope="session")
def engine():
    """In-memory SQLite engine shared by every connection"""
    import app.models  # noqa: F401

    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture(scope="function")
def db(engine) -> Session:
    """Create a database session with a clean schema for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def interface_registry() -> ContractInterfaceRegistry:
    return ContractInterfaceRegistry()


@pytest.fixture(scope="function")
def decorator_registry() -> ContractDecoratorRegistry:
    return ContractDecoratorRegistry()


@pytest.fixture(scope="function")
def client(db: Session, interface_registry, decorator_registry):
    """Create test client with database and registry dependency overrides"""
    import importlib.util

    # Import main module directly
    main_path = backend_dir / "main.py"
    spec = importlib.util.spec_from_file_location("main", main_path)
    main_module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(main_module)
    app = main_module.app

    from app.core.database import get_db
    from app.services.contract_decorator_registry import \
        get_contract_decorator_registry
    from app.services.contract_interface_registry import \
        get_contract_interface_registry
    from fastapi.testclient import TestClient

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_contract_interface_registry] = lambda: interface_registry
    app.dependency_overrides[get_contract_decorator_registry] = lambda: decorator_registry
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()
