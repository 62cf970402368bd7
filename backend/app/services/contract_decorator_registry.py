"""
In-memory registry of file-based contract decorators
"""
from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Iterable, List, Optional

from app.components.contract_decorator import ContractDecorator
from app.components.contract_json import ArtifactJson, ManifestJson
from app.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)

_AND_SEPARATOR = re.compile(r"\s+AND\s+")


@dataclass(frozen=True)
class ContractDecoratorFilters:
    """
    Tag and interface filters.

    Each filter is a list of alternatives (OR) where every alternative is a list of
    values that must all be present (AND). An empty filter matches everything.
    """
    contract_tags: List[List[str]] = field(default_factory=list)
    contract_implements: List[List[str]] = field(default_factory=list)

    @classmethod
    def from_query(
        cls,
        tags: Optional[Iterable[str]] = None,
        implements: Optional[Iterable[str]] = None,
    ) -> ContractDecoratorFilters:
        """Build filters from query values such as `tags=a AND b&tags=c`"""
        return cls(
            contract_tags=parse_or_list(tags),
            contract_implements=parse_or_list(implements),
        )

    def matches(self, tags: Iterable[str], implements: Iterable[str]) -> bool:
        return _matches(self.contract_tags, set(tags)) and _matches(self.contract_implements, set(implements))


def parse_or_list(values: Optional[Iterable[str]]) -> List[List[str]]:
    result = []
    for value in values or []:
        and_list = [v.strip() for v in _AND_SEPARATOR.split(value.strip()) if v.strip()]
        if and_list:
            result.append(and_list)
    return result


def _matches(or_list: List[List[str]], present: set) -> bool:
    if not or_list:
        return True
    return any(all(v in present for v in and_list) for and_list in or_list)


class ContractDecoratorRegistry:
    """Thread-safe store of resolved contract decorators and their source files, keyed by contract id"""

    def __init__(self):
        self._lock = threading.Lock()
        self._decorators: Dict[str, ContractDecorator] = {}
        self._manifests: Dict[str, ManifestJson] = {}
        self._artifacts: Dict[str, ArtifactJson] = {}
        self._info_markdowns: Dict[str, str] = {}

    def store(self, decorator: ContractDecorator) -> ContractDecorator:
        logger.info(f"Storing contract decorator with ID: {decorator.id}")
        with self._lock:
            self._decorators[decorator.id] = decorator
            self._manifests[decorator.id] = decorator.manifest
            self._artifacts[decorator.id] = decorator.artifact
        return decorator

    def store_info_markdown(self, contract_id: str, info_markdown: str) -> str:
        logger.info(f"Storing contract info.md with ID: {contract_id}")
        with self._lock:
            self._info_markdowns[contract_id] = info_markdown
        return info_markdown

    def delete(self, contract_id: str) -> bool:
        logger.info(f"Deleting contract decorator with ID: {contract_id}")
        with self._lock:
            self._manifests.pop(contract_id, None)
            self._artifacts.pop(contract_id, None)
            self._info_markdowns.pop(contract_id, None)
            return self._decorators.pop(contract_id, None) is not None

    def get_by_id(self, contract_id: str) -> Optional[ContractDecorator]:
        return self._decorators.get(contract_id)

    def get_manifest_json_by_id(self, contract_id: str) -> Optional[ManifestJson]:
        return self._manifests.get(contract_id)

    def get_artifact_json_by_id(self, contract_id: str) -> Optional[ArtifactJson]:
        return self._artifacts.get(contract_id)

    def get_info_markdown_by_id(self, contract_id: str) -> Optional[str]:
        return self._info_markdowns.get(contract_id)

    def get_all(self, filters: Optional[ContractDecoratorFilters] = None) -> List[ContractDecorator]:
        filters = filters or ContractDecoratorFilters()
        with self._lock:
            decorators = list(self._decorators.values())
        return [d for d in decorators if filters.matches(d.tags, d.implements)]

    def get_all_manifest_json_files(self, filters: Optional[ContractDecoratorFilters] = None) -> List[ManifestJson]:
        return [d.manifest for d in self.get_all(filters)]

    def get_all_artifact_json_files(self, filters: Optional[ContractDecoratorFilters] = None) -> List[ArtifactJson]:
        return [d.artifact for d in self.get_all(filters)]

    def get_all_info_markdown_files(self, filters: Optional[ContractDecoratorFilters] = None) -> List[str]:
        return [
            self._info_markdowns[d.id]
            for d in self.get_all(filters)
            if d.id in self._info_markdowns
        ]

    def clear(self):
        with self._lock:
            self._decorators.clear()
            self._manifests.clear()
            self._artifacts.clear()
            self._info_markdowns.clear()


@lru_cache()
def get_contract_decorator_registry() -> ContractDecoratorRegistry:
    """Get the process-wide contract decorator registry"""
    return ContractDecoratorRegistry()
