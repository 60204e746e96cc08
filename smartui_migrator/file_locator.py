"""Walk a project tree and match its files against glob patterns."""

from __future__ import annotations

import asyncio
import fnmatch
import logging
import os
import re
import threading
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Optional, Pattern, Tuple

from .config import ScannerConfig
from .log import get_logger
from .models import Platform
from .signatures import CONFIG_FILE_PATTERNS


@lru_cache(maxsize=256)
def _compile_glob(pattern: str) -> Pattern[str]:
    """Translate a glob into a regex over POSIX relative paths.

    ``**`` spans zero or more directories, ``*`` and ``?`` stay inside one
    segment. Wildcards never match a leading dot; spell the dot out to reach
    hidden files (``.github/workflows/*.yml``).
    """
    segments = pattern.strip("/").split("/")
    parts: List[str] = []
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if segment == "**":
            parts.append(r"(?:[^/.][^/]*/)*")
            if last:
                parts.append(r"[^/.][^/]*")
            continue

        chunk = "".join(
            "[^/]*" if char == "*" else "[^/]" if char == "?" else re.escape(char) for char in segment
        )
        if segment[:1] in {"*", "?"}:
            chunk = r"(?!\.)" + chunk
        parts.append(chunk if last else chunk + "/")
    return re.compile("".join(parts) + r"\Z")


def glob_match(path: str, pattern: str) -> bool:
    return _compile_glob(pattern).match(path) is not None


class FileLocator:
    """Lists the files of one project tree, minus dependency/VCS/build noise.

    The listing is taken once and reused: a scan is a one-shot read of a tree
    assumed not to change underneath it.
    """

    def __init__(
        self,
        root: str | os.PathLike,
        config: Optional[ScannerConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.root = Path(root)
        self.config = config or ScannerConfig()
        self.logger = logger or get_logger("file_locator")
        self._files: Optional[Tuple[str, ...]] = None
        self._lock = threading.Lock()

    def _ignored_dir(self, name: str) -> bool:
        if name in self.config.ignore_dirs:
            return True
        return any(fnmatch.fnmatch(name, pattern) for pattern in self.config.extra_ignore)

    def _ignored_file(self, name: str) -> bool:
        patterns = self.config.ignore_files + self.config.extra_ignore
        return any(fnmatch.fnmatch(name, pattern) for pattern in patterns)

    def _walk(self) -> Tuple[str, ...]:
        if not self.root.exists():
            raise FileNotFoundError(f"Project path does not exist: {self.root}")
        if not self.root.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {self.root}")

        def on_error(exc: OSError) -> None:
            self.logger.debug("Skipping unreadable directory %s: %s", exc.filename, exc)

        found: List[str] = []
        for current_root, dirs, files in os.walk(self.root, onerror=on_error):
            dirs[:] = sorted(d for d in dirs if not self._ignored_dir(d))
            rel_dir = Path(current_root).relative_to(self.root)
            for filename in sorted(files):
                if self._ignored_file(filename):
                    continue
                found.append((rel_dir / filename).as_posix())
        self.logger.debug("Indexed %d files under %s", len(found), self.root)
        return tuple(sorted(found))

    def files(self) -> Tuple[str, ...]:
        with self._lock:
            if self._files is None:
                self._files = self._walk()
            return self._files

    def glob(self, patterns: Iterable[str]) -> List[str]:
        compiled = [_compile_glob(pattern) for pattern in patterns]
        if not compiled:
            return []
        return [path for path in self.files() if any(regex.match(path) for regex in compiled)]

    def has_match(self, pattern: str) -> bool:
        return bool(self.glob([pattern]))

    def find_config_files(self, platform: Platform) -> List[str]:
        return self.glob(CONFIG_FILE_PATTERNS.get(platform, ()))

    async def aglob(self, patterns: Iterable[str]) -> List[str]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.glob, tuple(patterns))
