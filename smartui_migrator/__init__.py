"""SmartUI migrator package initialization."""

from .errors import MultiplePlatformsDetectedError, PlatformNotDetectedError, ScannerError
from .models import DetectionResult, Framework, Language, Platform, TestType
from .project_scanner import Scanner, scan_project, scan_project_async

__version__ = "0.1.0"

__all__ = [
    "DetectionResult",
    "Framework",
    "Language",
    "MultiplePlatformsDetectedError",
    "Platform",
    "PlatformNotDetectedError",
    "Scanner",
    "ScannerError",
    "TestType",
    "scan_project",
    "scan_project_async",
]
