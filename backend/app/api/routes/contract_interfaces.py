"""
API routes for contract interfaces
"""
from app.api.schemas import (ContractInterfaceManifestsResponse,
                             InfoMarkdownsResponse)
from app.components.contract_json import (InterfaceManifestJson,
                                          InterfaceManifestJsonWithId)
from app.core.exceptions import ResourceNotFoundError
from app.services.contract_interface_registry import (
    ContractInterfaceRegistry, get_contract_interface_registry)
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

router = APIRouter(prefix="/v1/contract-interfaces", tags=["contract-interfaces"])


def _get_manifest(registry: ContractInterfaceRegistry, interface_id: str) -> InterfaceManifestJson:
    manifest = registry.get_by_id(interface_id)
    if manifest is None:
        raise ResourceNotFoundError(f"Contract interface not found for interface ID: {interface_id}")
    return manifest


@router.get("", response_model=ContractInterfaceManifestsResponse)
async def list_contract_interfaces(
    registry: ContractInterfaceRegistry = Depends(get_contract_interface_registry),
):
    """List all contract interfaces"""
    return ContractInterfaceManifestsResponse(manifests=registry.get_all())


@router.get("/info.md", response_model=InfoMarkdownsResponse)
async def list_info_markdown_files(
    registry: ContractInterfaceRegistry = Depends(get_contract_interface_registry),
):
    return InfoMarkdownsResponse(info_markdowns=registry.get_all_info_markdown_files())


@router.get("/{interface_id}", response_model=InterfaceManifestJsonWithId)
async def get_contract_interface(
    interface_id: str,
    registry: ContractInterfaceRegistry = Depends(get_contract_interface_registry),
):
    manifest = _get_manifest(registry, interface_id)
    return InterfaceManifestJsonWithId(id=interface_id, **manifest.model_dump())


@router.get("/{interface_id}/manifest.json", response_model=InterfaceManifestJson)
async def get_contract_interface_manifest_json(
    interface_id: str,
    registry: ContractInterfaceRegistry = Depends(get_contract_interface_registry),
):
    return _get_manifest(registry, interface_id)


@router.get("/{interface_id}/info.md", response_class=PlainTextResponse)
async def get_contract_interface_info_markdown(
    interface_id: str,
    registry: ContractInterfaceRegistry = Depends(get_contract_interface_registry),
):
    info_markdown = registry.get_info_markdown_by_id(interface_id)
    if info_markdown is None:
        raise ResourceNotFoundError(f"Contract interface info.md not found for interface ID: {interface_id}")
    return PlainTextResponse(info_markdown, media_type="text/markdown")
