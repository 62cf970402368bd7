"""
In-memory registry of contract interfaces
"""
import threading
from functools import lru_cache
from typing import Dict, List, Optional, Set

from app.components.contract_json import (InterfaceManifestJson,
                                          InterfaceManifestJsonWithId)
from app.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)


class ContractInterfaceRegistry:
    """Thread-safe store of interface manifests and their info.md files, keyed by interface id"""

    def __init__(self):
        self._lock = threading.Lock()
        self._manifests: Dict[str, InterfaceManifestJson] = {}
        self._info_markdowns: Dict[str, str] = {}

    def store(self, interface_id: str, manifest: InterfaceManifestJson) -> InterfaceManifestJson:
        logger.info(f"Storing contract interface with ID: {interface_id}")
        with self._lock:
            self._manifests[interface_id] = manifest
        return manifest

    def store_info_markdown(self, interface_id: str, info_markdown: str) -> str:
        logger.info(f"Storing contract interface info.md with ID: {interface_id}")
        with self._lock:
            self._info_markdowns[interface_id] = info_markdown
        return info_markdown

    def delete(self, interface_id: str) -> bool:
        logger.info(f"Deleting contract interface with ID: {interface_id}")
        with self._lock:
            self._info_markdowns.pop(interface_id, None)
            return self._manifests.pop(interface_id, None) is not None

    def get_by_id(self, interface_id: str) -> Optional[InterfaceManifestJson]:
        return self._manifests.get(interface_id)

    def get_info_markdown_by_id(self, interface_id: str) -> Optional[str]:
        return self._info_markdowns.get(interface_id)

    def get_all(self) -> List[InterfaceManifestJsonWithId]:
        with self._lock:
            items = list(self._manifests.items())
        return [_with_id(interface_id, manifest) for interface_id, manifest in items]

    def get_all_info_markdown_files(self) -> List[str]:
        with self._lock:
            return list(self._info_markdowns.values())

    def get_all_with_partially_matching_interfaces(
        self,
        function_signatures: Set[str],
        event_signatures: Set[str],
    ) -> List[InterfaceManifestJsonWithId]:
        """
        Interfaces sharing at least one function or event signature with the given sets.

        Each result carries the subset of its decorators that matched.
        """
        logger.debug("Get all partially matching contract interfaces")
        with self._lock:
            items = list(self._manifests.items())

        result = []
        for interface_id, manifest in items:
            matching_functions = [d for d in manifest.function_decorators if d.signature in function_signatures]
            matching_events = [d for d in manifest.event_decorators if d.signature in event_signatures]
            if matching_functions or matching_events:
                result.append(
                    _with_id(
                        interface_id,
                        manifest,
                        matching_function_decorators=matching_functions,
                        matching_event_decorators=matching_events,
                    )
                )
        return result

    def clear(self):
        with self._lock:
            self._manifests.clear()
            self._info_markdowns.clear()


def _with_id(interface_id: str, manifest: InterfaceManifestJson, **matching) -> InterfaceManifestJsonWithId:
    return InterfaceManifestJsonWithId(
        id=interface_id,
        name=manifest.name,
        description=manifest.description,
        tags=manifest.tags,
        event_decorators=manifest.event_decorators,
        function_decorators=manifest.function_decorators,
        **matching,
    )


@lru_cache()
def get_contract_interface_registry() -> ContractInterfaceRegistry:
    """Get the process-wide interface registry"""
    return ContractInterfaceRegistry()
