"""
SQLAlchemy models
"""
from app.core.database import Base
from app.models.imported_contract_decorator import \
    ImportedContractDecorator  # noqa: F401

__all__ = ["Base", "ImportedContractDecorator"]
