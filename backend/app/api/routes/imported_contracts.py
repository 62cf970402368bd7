"""
API routes for imported contract decorators and their interfaces
"""
from uuid import UUID

from app.api.schemas import (ContractDecoratorResponse,
                             ImportContractRequest,
                             ImportedContractInterfacesRequest,
                             SuggestedContractInterfacesResponse)
from app.components.contract_json import ManifestJson
from app.core.database import get_db
from app.core.exceptions import ResourceNotFoundError
from app.core.logging_config import LoggingConfig
from app.services.contract_interface_registry import (
    ContractInterfaceRegistry, get_contract_interface_registry)
from app.services.contract_interfaces_service import ContractInterfacesService
from app.services.imported_contract_decorator_service import (
    ImportedContractDecoratorService, resolve_imported_decorator)
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/v1/imported-contracts", tags=["imported-contracts"])


def get_contract_interfaces_service(
    db: Session = Depends(get_db),
    interfaces: ContractInterfaceRegistry = Depends(get_contract_interface_registry),
) -> ContractInterfacesService:
    return ContractInterfacesService(db, interfaces)


@router.post("", response_model=ContractDecoratorResponse, status_code=status.HTTP_201_CREATED)
async def import_contract(
    request: ImportContractRequest,
    service: ContractInterfacesService = Depends(get_contract_interfaces_service),
):
    """Store the decorator of a contract imported into a project"""
    decorator = resolve_imported_decorator(
        request.contract_id,
        request.artifact_json,
        request.manifest_json,
        service.interfaces,
    )
    if request.attach_matching_interfaces:
        decorator = service.attach_matching_interfaces_to_decorator(decorator)

    stored = service.imported_decorators.store(
        project_id=request.project_id,
        contract_id=request.contract_id,
        manifest_json=decorator.manifest,
        artifact_json=decorator.artifact,
        info_markdown=request.info_markdown,
    )
    return ContractDecoratorResponse.model_validate(stored)


@router.get("/{contract_id:path}/suggested-interfaces", response_model=SuggestedContractInterfacesResponse)
async def get_suggested_interfaces(
    contract_id: str,
    project_id: UUID = Query(..., alias="projectId"),
    service: ContractInterfacesService = Depends(get_contract_interfaces_service),
):
    """Suggest contract interfaces for an imported contract"""
    matching = service.get_suggested_interfaces(contract_id, project_id)
    return SuggestedContractInterfacesResponse(
        manifests=matching.manifests,
        best_matching_interfaces=matching.best_matching_interfaces,
    )


@router.patch("/{contract_id:path}/add-interfaces", response_model=ManifestJson)
async def add_interfaces(
    contract_id: str,
    request: ImportedContractInterfacesRequest,
    project_id: UUID = Query(..., alias="projectId"),
    service: ContractInterfacesService = Depends(get_contract_interfaces_service),
):
    service.add_interfaces_to_imported_contract(contract_id, project_id, request.interfaces)
    return _get_manifest(service.imported_decorators, contract_id, project_id)


@router.patch("/{contract_id:path}/remove-interfaces", response_model=ManifestJson)
async def remove_interfaces(
    contract_id: str,
    request: ImportedContractInterfacesRequest,
    project_id: UUID = Query(..., alias="projectId"),
    service: ContractInterfacesService = Depends(get_contract_interfaces_service),
):
    service.remove_interfaces_from_imported_contract(contract_id, project_id, request.interfaces)
    return _get_manifest(service.imported_decorators, contract_id, project_id)


@router.patch("/{contract_id:path}/set-interfaces", response_model=ManifestJson)
async def set_interfaces(
    contract_id: str,
    request: ImportedContractInterfacesRequest,
    project_id: UUID = Query(..., alias="projectId"),
    service: ContractInterfacesService = Depends(get_contract_interfaces_service),
):
    service.set_imported_contract_interfaces(contract_id, project_id, request.interfaces)
    return _get_manifest(service.imported_decorators, contract_id, project_id)


def _get_manifest(imported: ImportedContractDecoratorService, contract_id: str, project_id: UUID) -> ManifestJson:
    manifest = imported.get_manifest_json_by_contract_id_and_project_id(contract_id, project_id)
    if manifest is None:
        raise ResourceNotFoundError(
            f"Imported contract decorator not found for contract ID: {contract_id} and project ID: {project_id}"
        )
    return manifest
