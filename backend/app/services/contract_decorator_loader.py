"""
Loads file-based contract interfaces and contract decorators into the in-memory registries.

Layout:
    <interfaces root>/<interface id>/manifest.json, info.md
    <contracts root>/<set>/<contract>/artifact.json, manifest.json, info.md
"""
from pathlib import Path
from typing import Iterable, List, Optional, Type

from pydantic import BaseModel, ValidationError

from app.components.contract_decorator import ContractDecorator
from app.components.contract_json import (ArtifactJson, InterfaceManifestJson,
                                          ManifestJson)
from app.core.exceptions import (ContractDecoratorError,
                                 ContractInterfaceNotFoundError)
from app.core.logging_config import LoggingConfig
from app.core.metrics import (contract_decorator_resolutions_total,
                              contract_decorators_loaded)
from app.services.contract_decorator_registry import ContractDecoratorRegistry
from app.services.contract_interface_registry import ContractInterfaceRegistry

logger = LoggingConfig.get_logger(__name__)

MANIFEST_JSON = "manifest.json"
ARTIFACT_JSON = "artifact.json"
INFO_MD = "info.md"


class ContractDecoratorLoader:
    """Populates interface and decorator registries from directories on disk"""

    def __init__(
        self,
        decorator_registry: ContractDecoratorRegistry,
        interface_registry: ContractInterfaceRegistry,
        contracts_root: Optional[Path],
        interfaces_root: Optional[Path],
        ignored_dirs: Iterable[str] = (),
    ):
        self.decorator_registry = decorator_registry
        self.interface_registry = interface_registry
        self.contracts_root = Path(contracts_root) if contracts_root else None
        self.interfaces_root = Path(interfaces_root) if interfaces_root else None
        self.ignored_dirs = set(ignored_dirs)

    def reload(self):
        """Load all interfaces, then all contract decorators"""
        self.load_interfaces()
        self.load_contracts()

    def load_interfaces(self) -> List[str]:
        """Load every interface directory; returns the ids that were stored"""
        if self.interfaces_root is None:
            logger.info("Contract interfaces root not configured, skipping")
            return []

        logger.info("Loading contract interfaces", extra={"root": str(self.interfaces_root)})
        loaded = []
        for interface_dir in self._sub_directories(self.interfaces_root):
            if self.load_interface(interface_dir):
                loaded.append(interface_dir.name)
        logger.info(f"Loaded {len(loaded)} contract interfaces")
        return loaded

    def load_interface(self, interface_dir: Path) -> bool:
        interface_id = interface_dir.name
        manifest = _read_model(interface_dir / MANIFEST_JSON, InterfaceManifestJson)

        if manifest is None:
            logger.warning(f"Interface manifest.json missing or invalid, removing interface: {interface_id}")
            self.interface_registry.delete(interface_id)
            contract_decorators_loaded.labels(kind="interface", status="skipped").inc()
            return False

        self.interface_registry.store(interface_id, manifest)
        info_markdown = _read_text(interface_dir / INFO_MD)
        if info_markdown is not None:
            self.interface_registry.store_info_markdown(interface_id, info_markdown)

        contract_decorators_loaded.labels(kind="interface", status="loaded").inc()
        return True

    def load_contracts(self) -> List[str]:
        """Load every `<set>/<contract>` directory; returns the ids that were stored"""
        if self.contracts_root is None:
            logger.info("Contract decorators root not configured, skipping")
            return []

        logger.info("Loading contract decorators", extra={"root": str(self.contracts_root)})
        loaded = []
        for set_dir in self._sub_directories(self.contracts_root):
            for contract_dir in self._sub_directories(set_dir):
                contract_id = self.load_contract(set_dir.name, contract_dir)
                if contract_id is not None:
                    loaded.append(contract_id)
        logger.info(f"Loaded {len(loaded)} contract decorators")
        return loaded

    def load_contract(self, set_name: str, contract_dir: Path) -> Optional[str]:
        contract_id = f"{set_name}/{contract_dir.name}"
        artifact = _read_model(contract_dir / ARTIFACT_JSON, ArtifactJson)
        manifest = _read_model(contract_dir / MANIFEST_JSON, ManifestJson)

        if artifact is None or manifest is None:
            logger.warning(f"Contract artifact.json or manifest.json missing or invalid, removing decorator: {contract_id}")
            self._skip_contract(contract_id)
            return None

        try:
            decorator = ContractDecorator.create(
                id=contract_id,
                artifact=artifact,
                manifest=manifest,
                imported=False,
                interfaces_provider=self.interface_registry,
            )
        except ContractInterfaceNotFoundError as e:
            logger.warning(f"Unable to resolve contract decorator {contract_id}: {e.message}")
            contract_decorator_resolutions_total.labels(imported="false", outcome="interface_not_found").inc()
            self._skip_contract(contract_id)
            return None
        except ContractDecoratorError as e:
            logger.warning(f"Unable to resolve contract decorator {contract_id}: {e.message}")
            contract_decorator_resolutions_total.labels(imported="false", outcome="incompatible").inc()
            self._skip_contract(contract_id)
            return None

        contract_decorator_resolutions_total.labels(imported="false", outcome="success").inc()
        self.decorator_registry.store(decorator)

        info_markdown = _read_text(contract_dir / INFO_MD)
        if info_markdown is not None:
            self.decorator_registry.store_info_markdown(contract_id, info_markdown)

        contract_decorators_loaded.labels(kind="contract", status="loaded").inc()
        return contract_id

    def _skip_contract(self, contract_id: str):
        self.decorator_registry.delete(contract_id)
        contract_decorators_loaded.labels(kind="contract", status="skipped").inc()

    def _sub_directories(self, root: Path) -> List[Path]:
        if not root.is_dir():
            logger.warning(f"Directory does not exist: {root}")
            return []
        return sorted(
            p for p in root.iterdir()
            if p.is_dir() and p.name not in self.ignored_dirs
        )


def _read_text(path: Path) -> Optional[str]:
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning(f"Unable to read file: {path}", extra={"error": str(e)})
        return None


def _read_model(path: Path, model: Type[BaseModel]):
    content = _read_text(path)
    if content is None:
        return None
    try:
        return model.model_validate_json(content)
    except ValidationError as e:
        logger.warning(
            f"Unable to parse {path.name}: {path}",
            extra={"error_count": e.error_count()}
        )
        return None
