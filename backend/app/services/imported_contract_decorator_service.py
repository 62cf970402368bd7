"""
Imported Contract Decorator Service for persisting decorators of imported contracts
"""
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID, uuid4

from app.components.contract_decorator import (ContractDecorator,
                                               InterfaceLookup)
from app.components.contract_json import ArtifactJson, ManifestJson
from app.core.exceptions import (ContractDecoratorError,
                                 ContractInterfaceNotFoundError,
                                 ResourceAlreadyExistsError)
from app.core.logging_config import LoggingConfig
from app.core.metrics import contract_decorator_resolutions_total
from app.models.imported_contract_decorator import ImportedContractDecorator
from app.services.contract_decorator_registry import ContractDecoratorFilters
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

logger = LoggingConfig.get_logger(__name__)


def resolve_imported_decorator(
    contract_id: str,
    artifact: ArtifactJson,
    manifest: ManifestJson,
    interfaces: InterfaceLookup,
) -> ContractDecorator:
    """Resolve an imported decorator, giving interface decorators priority over the manifest"""
    try:
        decorator = ContractDecorator.create(
            id=contract_id,
            artifact=artifact,
            manifest=manifest,
            imported=True,
            interfaces_provider=interfaces,
        )
    except ContractInterfaceNotFoundError:
        contract_decorator_resolutions_total.labels(imported="true", outcome="interface_not_found").inc()
        raise
    except ContractDecoratorError:
        contract_decorator_resolutions_total.labels(imported="true", outcome="incompatible").inc()
        raise

    contract_decorator_resolutions_total.labels(imported="true", outcome="success").inc()
    return decorator


class ImportedContractDecoratorService:
    """Service for storing and querying imported contract decorators of a project"""

    def __init__(self, db: Session, interfaces: InterfaceLookup):
        self.db = db
        self.interfaces = interfaces

    def store(
        self,
        project_id: UUID,
        contract_id: str,
        manifest_json: ManifestJson,
        artifact_json: ArtifactJson,
        info_markdown: str,
        imported_at: Optional[datetime] = None,
        id: Optional[UUID] = None,
    ) -> ContractDecorator:
        """
        Store an imported contract decorator

        Args:
            project_id: Project the contract was imported into
            contract_id: Contract id, unique within the project
            manifest_json: Manifest generated for the contract
            artifact_json: Artifact of the imported contract
            info_markdown: info.md content
            imported_at: Import time (default: now)
            id: Row id (default: random)

        Returns:
            Resolved ContractDecorator

        Raises:
            ContractDecoratorError: manifest does not fit the artifact
            ContractInterfaceNotFoundError: manifest implements an unknown interface
            ResourceAlreadyExistsError: contract is already imported into the project
        """
        logger.info(
            "Store imported contract decorator",
            extra={"project_id": str(project_id), "contract_id": contract_id}
        )

        decorator = resolve_imported_decorator(contract_id, artifact_json, manifest_json, self.interfaces)

        record = ImportedContractDecorator(
            id=id or uuid4(),
            project_id=project_id,
            contract_id=contract_id,
            manifest_json=manifest_json.to_json_dict(),
            artifact_json=artifact_json.to_json_dict(),
            info_markdown=info_markdown,
            contract_tags=list(manifest_json.tags),
            contract_implements=list(manifest_json.implements),
            imported_at=imported_at or datetime.now(timezone.utc),
        )

        self.db.add(record)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ResourceAlreadyExistsError(
                f"Contract {contract_id} is already imported into project {project_id}"
            ) from e

        return decorator

    def update_interfaces(
        self,
        contract_id: str,
        project_id: UUID,
        interfaces: List[str],
        manifest: ManifestJson,
    ) -> bool:
        """Replace the implemented interfaces; returns False when the contract is not imported"""
        logger.info(
            "Update imported contract decorator interfaces",
            extra={"project_id": str(project_id), "contract_id": contract_id, "interfaces": interfaces}
        )

        record = self._get_record(contract_id, project_id)
        if record is None:
            return False

        implements = list(dict.fromkeys(interfaces))
        record.contract_implements = implements
        record.manifest_json = manifest.model_copy(update={"implements": implements}).to_json_dict()
        self.db.commit()
        return True

    def get_by_contract_id_and_project_id(self, contract_id: str, project_id: UUID) -> Optional[ContractDecorator]:
        logger.debug(f"Get imported contract decorator by contract id: {contract_id}, project id: {project_id}")
        record = self._get_record(contract_id, project_id)
        return self._to_decorator(record) if record else None

    def get_manifest_json_by_contract_id_and_project_id(self, contract_id: str, project_id: UUID) -> Optional[ManifestJson]:
        record = self._get_record(contract_id, project_id)
        return ManifestJson.model_validate(record.manifest_json) if record else None

    def get_artifact_json_by_contract_id_and_project_id(self, contract_id: str, project_id: UUID) -> Optional[ArtifactJson]:
        record = self._get_record(contract_id, project_id)
        return ArtifactJson.model_validate(record.artifact_json) if record else None

    def get_info_markdown_by_contract_id_and_project_id(self, contract_id: str, project_id: UUID) -> Optional[str]:
        record = self._get_record(contract_id, project_id)
        return record.info_markdown if record else None

    def get_all(self, project_id: UUID, filters: Optional[ContractDecoratorFilters] = None) -> List[ContractDecorator]:
        """
        Get all imported decorators of a project matching the filters

        Decorators that no longer resolve (e.g. an implemented interface was removed) are skipped.
        """
        logger.debug(f"Get imported contract decorators by project id: {project_id}")
        result = []
        for record in self._get_records(project_id, filters):
            try:
                result.append(self._to_decorator(record))
            except (ContractDecoratorError, ContractInterfaceNotFoundError) as e:
                logger.warning(
                    f"Skipping unresolvable imported contract decorator {record.contract_id}: {e.message}",
                    extra={"project_id": str(project_id)}
                )
        return result

    def get_all_manifest_json_files(self, project_id: UUID, filters: Optional[ContractDecoratorFilters] = None) -> List[ManifestJson]:
        return [ManifestJson.model_validate(r.manifest_json) for r in self._get_records(project_id, filters)]

    def get_all_artifact_json_files(self, project_id: UUID, filters: Optional[ContractDecoratorFilters] = None) -> List[ArtifactJson]:
        return [ArtifactJson.model_validate(r.artifact_json) for r in self._get_records(project_id, filters)]

    def get_all_info_markdown_files(self, project_id: UUID, filters: Optional[ContractDecoratorFilters] = None) -> List[str]:
        return [r.info_markdown for r in self._get_records(project_id, filters)]

    def _get_record(self, contract_id: str, project_id: UUID) -> Optional[ImportedContractDecorator]:
        return self.db.query(ImportedContractDecorator).filter(
            ImportedContractDecorator.contract_id == contract_id,
            ImportedContractDecorator.project_id == project_id,
        ).first()

    def _get_records(
        self,
        project_id: UUID,
        filters: Optional[ContractDecoratorFilters],
    ) -> List[ImportedContractDecorator]:
        filters = filters or ContractDecoratorFilters()
        records = self.db.query(ImportedContractDecorator).filter(
            ImportedContractDecorator.project_id == project_id
        ).order_by(ImportedContractDecorator.imported_at.asc()).all()
        # array containment is not portable across dialects
        return [r for r in records if filters.matches(r.contract_tags or [], r.contract_implements or [])]

    def _to_decorator(self, record: ImportedContractDecorator) -> ContractDecorator:
        return resolve_imported_decorator(
            record.contract_id,
            ArtifactJson.model_validate(record.artifact_json),
            ManifestJson.model_validate(record.manifest_json),
            self.interfaces,
        )
