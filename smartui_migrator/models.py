"""Data types shared by the scanner and its downstream consumers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple


class Platform(str, Enum):
    PERCY = "Percy"
    APPLITOOLS = "Applitools"
    SAUCE_LABS_VISUAL = "Sauce Labs Visual"
    UNKNOWN = "unknown"


class Framework(str, Enum):
    CYPRESS = "Cypress"
    PLAYWRIGHT = "Playwright"
    SELENIUM = "Selenium"
    STORYBOOK = "Storybook"
    APPIUM = "Appium"
    ROBOT_FRAMEWORK = "Robot Framework"


class Language(str, Enum):
    JAVASCRIPT_TYPESCRIPT = "JavaScript/TypeScript"
    JAVA = "Java"
    PYTHON = "Python"


class TestType(str, Enum):
    E2E = "e2e"
    STORYBOOK = "storybook"
    APPIUM = "appium"

    # Keep pytest from collecting this enum as a test class.
    __test__ = False

    @classmethod
    def for_framework(cls, framework: Framework) -> "TestType":
        if framework is Framework.STORYBOOK:
            return cls.STORYBOOK
        if framework is Framework.APPIUM:
            return cls.APPIUM
        return cls.E2E


def _unique(values: Iterable[str]) -> Tuple[str, ...]:
    seen: Dict[str, None] = {}
    for value in values:
        seen.setdefault(value, None)
    return tuple(seen)


@dataclass(frozen=True)
class Evidence:
    """Where the platform decision came from."""

    source: str
    match: str

    def to_dict(self) -> Dict[str, str]:
        return {"source": self.source, "match": self.match}


@dataclass(frozen=True)
class Anchor:
    """Cheap, high-confidence platform signal found before any content scan."""

    platform: Platform
    magic_strings: Tuple[str, ...] = ()
    framework: Optional[Framework] = None
    language: Optional[Language] = None
    evidence: Optional[Evidence] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "magic_strings", _unique(self.magic_strings))

    @classmethod
    def unknown(cls) -> "Anchor":
        return cls(platform=Platform.UNKNOWN)

    @property
    def is_unknown(self) -> bool:
        return self.platform is Platform.UNKNOWN

    @property
    def is_complete(self) -> bool:
        return self.framework is not None and self.language is not None


@dataclass(frozen=True)
class DetectedFiles:
    config: Tuple[str, ...] = ()
    source: Tuple[str, ...] = ()
    ci: Tuple[str, ...] = ()
    package_manager: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, list]:
        return {
            "config": list(self.config),
            "source": list(self.source),
            "ci": list(self.ci),
            "packageManager": list(self.package_manager),
        }


@dataclass(frozen=True)
class FrameworkEvidence:
    files: Tuple[str, ...] = ()
    signatures: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, list]:
        return {"files": list(self.files), "signatures": list(self.signatures)}


@dataclass(frozen=True)
class DetectionResult:
    """Final scan artifact handed to the config, code and CI transformers."""

    platform: Platform
    framework: Framework
    language: Language
    test_type: TestType
    files: DetectedFiles = field(default_factory=DetectedFiles)
    evidence: Evidence = field(default_factory=lambda: Evidence("content-scan", "magic-strings"))
    framework_evidence: FrameworkEvidence = field(default_factory=FrameworkEvidence)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "platform": self.platform.value,
            "framework": self.framework.value,
            "language": self.language.value,
            "testType": self.test_type.value,
            "files": self.files.to_dict(),
            "evidence": {
                "platform": self.evidence.to_dict(),
                "framework": self.framework_evidence.to_dict(),
            },
        }
