"""Reporting utilities: JSON and Markdown scan reports plus the CLI summary line."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

from .models import DetectionResult
from .template_engine import render_template

REPORT_TEMPLATE = "report.md.j2"
FILE_SECTIONS = (
    ("Configuration Files", "config"),
    ("Source Files", "source"),
    ("CI/CD Files", "ci"),
    ("Package Manager Files", "packageManager"),
)


def _write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def collect_warnings(result: DetectionResult) -> List[str]:
    warnings: List[str] = []
    if not result.files.source:
        warnings.append(
            f"No source files call {result.platform.value} APIs; only configuration will be migrated."
        )
    if not result.files.config:
        warnings.append(f"No {result.platform.value} configuration file found.")
    if result.evidence.source == "content-scan":
        warnings.append(
            "Platform inferred from source code only; no matching dependency or config file was found."
        )
    return warnings


def render_summary(result: DetectionResult) -> str:
    parts = [
        f"Platform: {result.platform.value}",
        f"Framework: {result.framework.value}",
        f"Language: {result.language.value}",
        f"Test type: {result.test_type.value}",
        f"Source files: {len(result.files.source)}",
    ]
    return " | ".join(parts)


def render_markdown(result: DetectionResult, warnings: List[str]) -> str:
    return render_template(
        REPORT_TEMPLATE,
        {"result": result.to_dict(), "warnings": warnings, "sections": FILE_SECTIONS},
    )


def generate_reports(
    output_dir: Path,
    result: DetectionResult,
    warnings: Optional[List[str]] = None,
) -> List[Path]:
    """Write report.json and report.md to the output directory."""
    warnings = collect_warnings(result) if warnings is None else warnings
    report_json_path = output_dir / "report.json"
    report_md_path = output_dir / "report.md"

    report_data = {"detection": result.to_dict(), "warnings": warnings}
    _write_file(report_json_path, json.dumps(report_data, indent=2))
    _write_file(report_md_path, render_markdown(result, warnings))
    return [report_json_path, report_md_path]
