"""Read package manifests and turn known dependencies into platform anchors."""

from __future__ import annotations

import asyncio
import json
import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Set

from .errors import MultiplePlatformsDetectedError
from .file_locator import FileLocator
from .log import get_logger
from .models import Anchor, Evidence
from .signatures import (
    DEPENDENCY_SIGNATURES,
    ECOSYSTEMS,
    PACKAGE_JSON,
    POM_XML,
    REQUIREMENTS_TXT,
    DependencySignature,
)

_REQUIREMENT_NAME = re.compile(r"^([A-Za-z0-9][A-Za-z0-9._-]*)")


def normalize_python_name(name: str) -> str:
    """PEP 503 normalization: ``Saucelabs_Visual`` -> ``saucelabs-visual``."""
    return re.sub(r"[-_.]+", "-", name).lower()


def parse_package_json(text: str) -> Set[str]:
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("package.json root is not an object")

    deps: Set[str] = set()
    for section in ("dependencies", "devDependencies"):
        section_data = data.get(section) or {}
        if isinstance(section_data, dict):
            deps.update(section_data.keys())
    return deps


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _text(element: ET.Element, name: str) -> str:
    child = _child(element, name)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def parse_pom_xml(text: str) -> Set[str]:
    """Return ``groupId:artifactId`` for every declared or managed dependency."""
    root = ET.fromstring(text)
    if _local_name(root.tag) != "project":
        raise ValueError("pom.xml root element is not <project>")

    sections = [_child(root, "dependencies")]
    management = _child(root, "dependencyManagement")
    if management is not None:
        sections.append(_child(management, "dependencies"))

    deps: Set[str] = set()
    for section in sections:
        if section is None:
            continue
        for dependency in section:
            if _local_name(dependency.tag) != "dependency":
                continue
            artifact = _text(dependency, "artifactId")
            if artifact:
                deps.add(f"{_text(dependency, 'groupId')}:{artifact}")
    return deps


def parse_requirements(text: str) -> Set[str]:
    deps: Set[str] = set()
    for raw_line in text.splitlines():
        line = raw_line.split(" #", 1)[0].strip()
        if not line or line.startswith(("#", "-")):
            continue
        match = _REQUIREMENT_NAME.match(line)
        if match:
            deps.add(normalize_python_name(match.group(1)))
    return deps


PARSERS = {
    PACKAGE_JSON: parse_package_json,
    POM_XML: parse_pom_xml,
    REQUIREMENTS_TXT: parse_requirements,
}


def _declares(deps: FrozenSet[str], identifier: str) -> bool:
    if identifier.startswith("*:"):
        artifact = identifier[1:]
        return any(dep.endswith(artifact) for dep in deps)
    return identifier in deps


class DependencyReader:
    """Looks at the top-level manifest of each ecosystem independently."""

    def __init__(self, locator: FileLocator, logger: Optional[logging.Logger] = None):
        self.locator = locator
        self.logger = logger or get_logger("dependency_reader")

    @property
    def root(self) -> Path:
        return self.locator.root

    def read_dependencies(self, ecosystem: str) -> Optional[FrozenSet[str]]:
        """Parsed identifiers, or None when the manifest is absent or unusable."""
        path = self.root / ecosystem
        self.logger.debug("Attempting to read file: %s", path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.debug("Could not read %s. Reason: %s", path, exc)
            return None

        try:
            deps = PARSERS[ecosystem](text)
        except (ValueError, ET.ParseError) as exc:
            # json.JSONDecodeError is a ValueError
            self.logger.debug("Could not parse %s. Reason: %s", path, exc)
            return None
        self.logger.debug("Read %d dependencies from %s", len(deps), ecosystem)
        return frozenset(deps)

    def _applies(self, signature: DependencySignature, deps: FrozenSet[str]) -> bool:
        if signature.companion and not _declares(deps, signature.companion):
            return False
        if signature.requires_glob and not self.locator.has_match(signature.requires_glob):
            return False
        return True

    def match_signatures(self, ecosystem: str, deps: FrozenSet[str]) -> List[DependencySignature]:
        """One signature per declared identifier, most specific applicable row first."""
        chosen: Dict[str, DependencySignature] = {}
        for signature in DEPENDENCY_SIGNATURES:
            if signature.ecosystem != ecosystem or signature.identifier in chosen:
                continue
            if _declares(deps, signature.identifier) and self._applies(signature, deps):
                self.logger.debug("Found '%s' in %s", signature.identifier, ecosystem)
                chosen[signature.identifier] = signature
        return list(chosen.values())

    def anchor_for(self, ecosystem: str) -> Anchor:
        deps = self.read_dependencies(ecosystem)
        if not deps:
            return Anchor.unknown()

        matches = self.match_signatures(ecosystem, deps)
        if len(matches) > 1:
            platforms = [signature.platform for signature in matches]
            self.logger.debug(
                "Multiple platforms detected in %s: %s",
                ecosystem,
                ", ".join(f"{s.platform.value} ({s.identifier})" for s in matches),
            )
            raise MultiplePlatformsDetectedError(
                platforms,
                source=ecosystem,
                matches=[f"{s.platform.value} ({s.identifier})" for s in matches],
            )
        if not matches:
            self.logger.debug("No visual testing dependency found in %s", ecosystem)
            return Anchor.unknown()

        signature = matches[0]
        return Anchor(
            platform=signature.platform,
            magic_strings=signature.magic_strings,
            framework=signature.framework,
            language=signature.language,
            evidence=Evidence(source=ecosystem, match=signature.identifier),
        )

    async def read_anchors(self) -> List[Anchor]:
        """Known anchors from every ecosystem, read concurrently, in ECOSYSTEMS order."""
        loop = asyncio.get_running_loop()
        anchors = await asyncio.gather(
            *(loop.run_in_executor(None, self.anchor_for, ecosystem) for ecosystem in ECOSYSTEMS)
        )
        return [anchor for anchor in anchors if not anchor.is_unknown]
