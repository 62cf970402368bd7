"""
Imported contract decorator model
Decorators generated for contracts imported into a project, stored per (contract_id, project_id)
"""
from datetime import datetime, timezone
from uuid import uuid4

from app.core.database import Base
from sqlalchemy import (JSON, Column, DateTime, String, Text, UniqueConstraint,
                        Uuid)
from sqlalchemy.dialects.postgresql import JSONB

JsonColumnType = JSON().with_variant(JSONB(), "postgresql")


class ImportedContractDecorator(Base):
    """Imported contract decorator - manifest, artifact and info.md of an imported contract"""
    __tablename__ = "imported_contract_decorators"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    project_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    contract_id = Column(String(255), nullable=False)

    # Source files
    manifest_json = Column(JsonColumnType, nullable=False)
    artifact_json = Column(JsonColumnType, nullable=False)
    info_markdown = Column(Text, nullable=False, default="")

    # Denormalized for filtering
    contract_tags = Column(JsonColumnType, nullable=False, default=list)
    contract_implements = Column(JsonColumnType, nullable=False, default=list)

    imported_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    __table_args__ = (
        UniqueConstraint("contract_id", "project_id", name="uq_imported_contract_decorators_contract_project"),
    )

    def __repr__(self):
        return f"<ImportedContractDecorator(contract_id={self.contract_id}, project_id={self.project_id})>"
