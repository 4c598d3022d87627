"""
Plain-text rendering of an InsightReport for the terminal.
"""

from __future__ import annotations

from models.events import InsightReport, Severity
from models.snapshot import format_clock
from models.state import Visibility

_SEVERITY_TAGS = {
    Severity.INFO: "[info]",
    Severity.WARNING: "[WARN]",
    Severity.CRITICAL: "[!!!!]",
}


def render_report(report: InsightReport) -> str:
    phase = report.phase.name.replace("_", " ").title()
    lines = [f"=== {format_clock(report.clock)} | {phase} ==="]

    for alert in report.alerts:
        lines.append(f"{_SEVERITY_TAGS[alert.severity]} {alert.message}")

    if report.timers:
        lines.append("Timers:")
        lines.extend(f"  - {timer.message}" for timer in report.timers)

    if report.enemies:
        lines.append("Enemies:")
        for enemy in report.enemies:
            label = f"{enemy.name} (lvl ~{enemy.estimated_level})"
            if enemy.visibility is Visibility.VISIBLE:
                line = f"  - {label}: visible in {enemy.region}"
                if enemy.heading:
                    line += f", moving {enemy.heading}"
            else:
                line = (
                    f"  - {label}: missing {enemy.seconds_unseen}s, "
                    f"likely {enemy.region} ({enemy.confidence:.0%})"
                )
                if enemy.heading:
                    line += f", last moving {enemy.heading}"
            lines.append(line)

    if report.buildings:
        lines.append("Damaged buildings:")
        lines.extend(
            f"  - {building.team.name.title()} {building.name}: {building.health_percent}%"
            for building in report.buildings
        )

    if report.tips:
        lines.append("Tips:")
        lines.extend(f"  - {tip}" for tip in report.tips)

    if report.items:
        lines.append("Items you can buy now:")
        lines.extend(f"  - {item.name} ({item.cost}g)" for item in report.items)

    for note in report.notes:
        lines.append(f"{_SEVERITY_TAGS[note.severity]} {note.message}")

    return "\n".join(lines)
