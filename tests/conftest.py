"""Shared fixtures: throwaway project trees and a silent logger."""

import asyncio
from pathlib import Path

import pytest

from smartui_migrator.log import null_logger


@pytest.fixture
def quiet_logger():
    return null_logger()


@pytest.fixture
def make_project(tmp_path):
    """Write ``{relative path: content}`` under tmp_path and return the root.

    ``bytes`` values are written raw so tests can plant undecodable files.
    """

    def _make(files: dict) -> Path:
        for relpath, content in files.items():
            path = tmp_path / relpath
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return tmp_path

    return _make


@pytest.fixture
def run():
    return asyncio.run
