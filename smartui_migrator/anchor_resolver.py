"""Pick the single platform anchor for a project, or none at all."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from .dependency_reader import DependencyReader
from .errors import MultiplePlatformsDetectedError
from .file_locator import FileLocator
from .log import get_logger
from .models import Anchor, Evidence
from .signatures import CONFIG_ANCHOR_MAGIC_STRINGS, CONFIG_FILE_PATTERNS


def _describe(anchor: Anchor) -> str:
    evidence = anchor.evidence
    if evidence is None:
        return anchor.platform.value
    if evidence.source == "config-file":
        return f"{anchor.platform.value} ({evidence.match})"
    return f"{anchor.platform.value} ({evidence.match} in {evidence.source})"


class AnchorResolver:
    """Dependencies first, config files only when no manifest names a platform.

    Candidates are never merged or ranked against each other; more than one
    raises MultiplePlatformsDetectedError.
    """

    def __init__(
        self,
        locator: FileLocator,
        reader: Optional[DependencyReader] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.locator = locator
        self.logger = logger or get_logger("anchor_resolver")
        self.reader = reader or DependencyReader(locator, logger=self.logger)

    async def config_anchors(self) -> List[Anchor]:
        loop = asyncio.get_running_loop()
        platforms = list(CONFIG_FILE_PATTERNS)
        found = await asyncio.gather(
            *(loop.run_in_executor(None, self.locator.find_config_files, platform) for platform in platforms)
        )

        anchors: List[Anchor] = []
        for platform, paths in zip(platforms, found):
            if not paths:
                self.logger.debug("No %s configuration files found", platform.value)
                continue
            self.logger.debug("Found %s config files: %s", platform.value, ", ".join(paths))
            anchors.append(
                Anchor(
                    platform=platform,
                    magic_strings=CONFIG_ANCHOR_MAGIC_STRINGS[platform],
                    evidence=Evidence(source="config-file", match=paths[0]),
                )
            )
        return anchors

    async def resolve(self) -> Anchor:
        candidates = await self.reader.read_anchors()
        if len(candidates) > 1:
            self._conflict(candidates, "dependencies")
        if candidates:
            anchor = candidates[0]
            self.logger.debug(
                "Dependency anchor: %s (%s in %s)",
                anchor.platform.value,
                anchor.evidence.match if anchor.evidence else "?",
                anchor.evidence.source if anchor.evidence else "?",
            )
            return anchor

        self.logger.debug("No dependency anchor, falling back to configuration files")
        candidates = await self.config_anchors()
        if len(candidates) > 1:
            self._conflict(candidates, "config-file")
        if candidates:
            return candidates[0]

        self.logger.debug("No anchor found through any method")
        return Anchor.unknown()

    def _conflict(self, candidates: List[Anchor], source: str) -> None:
        platforms = [anchor.platform for anchor in candidates]
        matches = [_describe(anchor) for anchor in candidates]
        self.logger.debug("Multiple platforms detected from %s: %s", source, ", ".join(matches))
        raise MultiplePlatformsDetectedError(platforms, source=source, matches=matches)

