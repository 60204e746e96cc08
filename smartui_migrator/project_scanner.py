"""Scan a project tree and produce a DetectionResult.

Anchor and search: a cheap anchor (manifest dependency, else config file)
pins the platform, then a content search collects the source files that
actually call it. Without an anchor the content search runs cold over every
platform's magic strings and the platform is inferred from what matched.

    Start -> ResolvingAnchor -> SearchingContent -> Assembling -> Done

Either terminal detection error can be raised from ResolvingAnchor
(multiple platforms) or SearchingContent (platform not detected).
"""

from __future__ import annotations

import asyncio
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from .anchor_resolver import AnchorResolver
from .config import ScannerConfig
from .content_searcher import ContentSearcher, SearchResult, magic_strings_for
from .errors import MultiplePlatformsDetectedError, PlatformNotDetectedError, ScannerError
from .file_locator import FileLocator
from .log import get_logger
from .models import (
    Anchor,
    DetectedFiles,
    DetectionResult,
    Evidence,
    Framework,
    FrameworkEvidence,
    Language,
    Platform,
    TestType,
)
from .signatures import CI_PATTERNS, PACKAGE_MANAGER_PATTERNS, PLATFORM_MAGIC_STRINGS
from .tech_detector import detect_framework, detect_language, detect_platform


class ScanState(str, Enum):
    START = "start"
    RESOLVING_ANCHOR = "resolving-anchor"
    SEARCHING_CONTENT = "searching-content"
    ASSEMBLING = "assembling"
    DONE = "done"
    FAILED = "failed"


class Scanner:
    """One-shot scanner for a single project root."""

    def __init__(
        self,
        project_path: str | os.PathLike,
        config: Optional[ScannerConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.project_path = Path(project_path)
        self.config = config or ScannerConfig()
        self.logger = logger or get_logger()
        self.state = ScanState.START

    async def scan(self) -> DetectionResult:
        if self.state is not ScanState.START:
            raise ScannerError("Scanner error: a Scanner instance can only scan once")
        try:
            return await self._scan()
        except (PlatformNotDetectedError, MultiplePlatformsDetectedError) as exc:
            self.state = ScanState.FAILED
            self.logger.debug("Platform detection error: %s", exc)
            raise
        except ScannerError:
            self.state = ScanState.FAILED
            raise
        except Exception as exc:
            self.state = ScanState.FAILED
            self.logger.debug("Scanner error: %s", exc)
            raise ScannerError.wrap(exc) from exc

    async def _scan(self) -> DetectionResult:
        root = self.project_path.resolve()
        self.logger.debug("Resolved target directory to absolute path: %s", root)

        locator = FileLocator(root, self.config, logger=self.logger)
        # Fail early on a missing root instead of reporting "no manifests".
        await asyncio.get_running_loop().run_in_executor(None, locator.files)

        self.state = ScanState.RESOLVING_ANCHOR
        anchor = await AnchorResolver(locator, logger=self.logger).resolve()
        self.logger.debug(
            "Anchor result: platform=%s, magicStrings=%s",
            anchor.platform.value,
            ", ".join(anchor.magic_strings),
        )

        self.state = ScanState.SEARCHING_CONTENT
        magic_strings = magic_strings_for(anchor)
        if anchor.is_unknown:
            self.logger.debug("No anchor found, performing cold search with all magic strings")
        elif not anchor.is_complete:
            self.logger.debug("Platform anchor found but no framework info, using broader magic strings")

        searcher = ContentSearcher(locator, self.config, logger=self.logger)
        found = await searcher.search(magic_strings)

        platform, evidence = anchor.platform, anchor.evidence
        if anchor.is_unknown:
            if not found.files:
                self.logger.debug("No platform detected through any method")
                raise PlatformNotDetectedError()
            platform = detect_platform(found.contents)
            found = found.restrict(PLATFORM_MAGIC_STRINGS[platform])
            evidence = Evidence(source="content-scan", match="magic-strings")
            self.logger.debug("Determined platform from content: %s", platform.value)

        self.state = ScanState.ASSEMBLING
        result = await self._assemble(locator, platform, anchor, found, evidence)
        self.state = ScanState.DONE
        self.logger.debug(
            "Final detection result: platform=%s, framework=%s, sourceFiles=%d",
            result.platform.value,
            result.framework.value,
            len(result.files.source),
        )
        return result

    def _classify(self, anchor: Anchor, found: SearchResult) -> Tuple[Framework, Language, FrameworkEvidence]:
        if anchor.is_complete:
            self.logger.debug("Using framework from anchor: %s", anchor.framework.value)
            return anchor.framework, anchor.language, FrameworkEvidence(files=found.files)

        framework, framework_evidence = detect_framework(found.contents)
        if anchor.framework is not None:
            framework = anchor.framework
        language = anchor.language or detect_language(found.files)
        self.logger.debug("Using framework from signature detection: %s", framework.value)
        return framework, language, framework_evidence

    async def _assemble(
        self,
        locator: FileLocator,
        platform: Platform,
        anchor: Anchor,
        found: SearchResult,
        evidence: Optional[Evidence],
    ) -> DetectionResult:
        framework, language, framework_evidence = self._classify(anchor, found)

        loop = asyncio.get_running_loop()
        config, ci, package_manager = await asyncio.gather(
            loop.run_in_executor(None, locator.find_config_files, platform),
            locator.aglob(CI_PATTERNS),
            locator.aglob(PACKAGE_MANAGER_PATTERNS),
        )

        return DetectionResult(
            platform=platform,
            framework=framework,
            language=language,
            test_type=TestType.for_framework(framework),
            files=DetectedFiles(
                config=tuple(config),
                source=found.files,
                ci=tuple(ci),
                package_manager=tuple(package_manager),
            ),
            evidence=evidence or Evidence(source="content-scan", match="magic-strings"),
            framework_evidence=framework_evidence,
        )


async def scan_project_async(
    root_path: str | os.PathLike,
    config: Optional[ScannerConfig] = None,
    logger: Optional[logging.Logger] = None,
) -> DetectionResult:
    return await Scanner(root_path, config=config, logger=logger).scan()


def scan_project(
    root_path: str | os.PathLike,
    config: Optional[ScannerConfig] = None,
    logger: Optional[logging.Logger] = None,
) -> DetectionResult:
    """Scan ``root_path`` and return its DetectionResult.

    Raises PlatformNotDetectedError, MultiplePlatformsDetectedError, or
    ScannerError for anything else. Must not be called from inside a running
    event loop; use ``scan_project_async`` there.
    """
    return asyncio.run(scan_project_async(root_path, config=config, logger=logger))
