"""Infer framework, language and (for cold scans) platform from matched files."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Dict, Iterable, List, Mapping, Tuple

from .errors import PlatformNotDetectedError
from .models import Framework, FrameworkEvidence, Language, Platform
from .signatures import FRAMEWORK_ORDER, FRAMEWORK_SIGNATURES, PLATFORM_MAGIC_STRINGS


def _best(scores: Mapping, default):
    """Key with the strictly highest positive score; ties keep the first declared."""
    best, best_score = default, 0.0
    for key, score in scores.items():
        if score > best_score:
            best, best_score = key, score
    return best


def score_frameworks(
    contents: Mapping[str, str],
) -> Tuple[Dict[Framework, float], Dict[Framework, FrameworkEvidence]]:
    """Weighted signature scores per framework.

    Every match counts, so five ``cy.visit(`` calls in a file add five times
    the pattern's weight. Files are visited in path order to keep float sums
    reproducible.
    """
    scores: Dict[Framework, float] = {framework: 0.0 for framework in FRAMEWORK_ORDER}
    files: Dict[Framework, List[str]] = {framework: [] for framework in FRAMEWORK_ORDER}
    signatures: Dict[Framework, List[str]] = {framework: [] for framework in FRAMEWORK_ORDER}

    for path in sorted(contents):
        content = contents[path]
        for signature in FRAMEWORK_SIGNATURES:
            hits = sum(1 for _ in signature.pattern.finditer(content))
            if not hits:
                continue
            framework = signature.framework
            scores[framework] += signature.weight * hits
            if path not in files[framework]:
                files[framework].append(path)
            if signature.pattern.pattern not in signatures[framework]:
                signatures[framework].append(signature.pattern.pattern)

    evidence = {
        framework: FrameworkEvidence(files=tuple(files[framework]), signatures=tuple(signatures[framework]))
        for framework in FRAMEWORK_ORDER
    }
    return scores, evidence


def detect_framework(contents: Mapping[str, str]) -> Tuple[Framework, FrameworkEvidence]:
    """Highest-scoring framework, or Selenium when nothing matched at all."""
    scores, evidence = score_frameworks(contents)
    framework = _best(scores, None)
    if framework is None:
        return Framework.SELENIUM, FrameworkEvidence()
    return framework, evidence[framework]


def detect_language(paths: Iterable[str]) -> Language:
    suffixes = {PurePosixPath(path).suffix.lower() for path in paths}
    if ".java" in suffixes:
        return Language.JAVA
    if suffixes & {".py", ".robot"}:
        return Language.PYTHON
    return Language.JAVASCRIPT_TYPESCRIPT


def score_platforms(contents: Mapping[str, str]) -> Dict[Platform, int]:
    """Number of distinct magic strings per platform found in each file, summed."""
    scores: Dict[Platform, int] = {platform: 0 for platform in PLATFORM_MAGIC_STRINGS}
    for content in contents.values():
        for platform, magic_strings in PLATFORM_MAGIC_STRINGS.items():
            scores[platform] += sum(1 for magic in magic_strings if magic in content)
    return scores


def detect_platform(contents: Mapping[str, str]) -> Platform:
    scores = score_platforms(contents)
    platform = _best(scores, None)
    if platform is None:
        raise PlatformNotDetectedError()
    return platform
