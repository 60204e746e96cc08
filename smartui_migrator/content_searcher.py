"""Deep scan of source files for platform magic strings."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .config import ScannerConfig
from .file_locator import FileLocator
from .log import get_logger
from .models import Anchor
from .signatures import PLATFORM_MAGIC_STRINGS, SOURCE_PATTERNS


def magic_strings_for(anchor: Anchor) -> Tuple[str, ...]:
    """Strings to search for, depending on how much the anchor already tells us.

    No anchor: every platform's strings (cold search). Anchor without
    framework/language: the anchor's strings plus its platform's broad set.
    Complete anchor: the anchor's own strings.
    """
    if anchor.is_unknown:
        strings: List[str] = []
        for platform_strings in PLATFORM_MAGIC_STRINGS.values():
            strings.extend(platform_strings)
        return tuple(dict.fromkeys(strings))
    if not anchor.is_complete:
        broad = PLATFORM_MAGIC_STRINGS.get(anchor.platform, ())
        return tuple(dict.fromkeys(anchor.magic_strings + broad))
    return anchor.magic_strings


def contains_any(content: str, magic_strings: Iterable[str]) -> bool:
    return any(magic in content for magic in magic_strings)


@dataclass(frozen=True)
class SearchResult:
    """Matched files (sorted) and their contents, keyed by relative path."""

    files: Tuple[str, ...] = ()
    contents: Dict[str, str] = field(default_factory=dict)

    def restrict(self, magic_strings: Iterable[str]) -> "SearchResult":
        strings = tuple(magic_strings)
        kept = tuple(path for path in self.files if contains_any(self.contents[path], strings))
        return SearchResult(files=kept, contents={path: self.contents[path] for path in kept})


class ContentSearcher:
    def __init__(
        self,
        locator: FileLocator,
        config: Optional[ScannerConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.locator = locator
        self.config = config or locator.config
        self.logger = logger or get_logger("content_searcher")

    def _read(self, relpath: str) -> Optional[str]:
        path = self.locator.root / relpath
        try:
            size = path.stat().st_size
            if size > self.config.max_file_bytes:
                self.logger.debug("Skipping %s: %d bytes exceeds limit", relpath, size)
                return None
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.debug("Could not read file %s. Reason: %s", relpath, exc)
            return None

    async def search(self, magic_strings: Iterable[str]) -> SearchResult:
        strings = tuple(magic_strings)
        candidates = await self.locator.aglob(SOURCE_PATTERNS)
        self.logger.debug(
            "Searching %d candidate source files for %d magic strings", len(candidates), len(strings)
        )
        if not strings or not candidates:
            return SearchResult()

        loop = asyncio.get_running_loop()
        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async def read(relpath: str) -> Optional[str]:
            async with semaphore:
                return await loop.run_in_executor(None, self._read, relpath)

        texts = await asyncio.gather(*(read(relpath) for relpath in candidates))

        contents: Dict[str, str] = {}
        for relpath, text in zip(candidates, texts):
            if text is not None and contains_any(text, strings):
                self.logger.debug("Found magic string in file: %s", relpath)
                contents[relpath] = text

        files = tuple(sorted(contents))
        self.logger.debug("Deep content search found %d files with magic strings", len(files))
        return SearchResult(files=files, contents=contents)
