"""Human-readable summary rendering for check results."""

from __future__ import annotations

from collections.abc import Sequence

from .models import Finding


def _format_path(path: Sequence[str]) -> str:
    return " > ".join(path) if path else "(root)"


def _format_line(line: int) -> str:
    return str(line) if line else "n/a"


def render_summary(findings: Sequence[Finding], lockfile: str | None = None) -> str:
    """Return a Markdown string with totals and a table of vulnerable packages."""
    packages = {(finding.module, finding.version) for finding in findings}

    lines = []
    lines.append("# shrinkwrap-audit Summary")
    lines.append("")
    lines.append(f"Vulnerable packages: {len(packages)} | Findings: {len(findings)}")
    lines.append("")

    if not findings:
        lines.append("No known vulnerabilities found.")
        return "\n".join(lines) + "\n"

    location = f"Line ({lockfile})" if lockfile else "Line"
    lines.append(f"| Module | Version | Advisory | Path | {location} |")
    lines.append("| --- | --- | --- | --- | --- |")

    for finding in findings:
        lines.append(
            f"| {finding.module} | {finding.version} "
            f"| [{finding.title}]({finding.advisory}) "
            f"| {_format_path(finding.path)} | {_format_line(finding.line)} |"
        )

    return "\n".join(lines) + "\n"
