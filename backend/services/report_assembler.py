"""
Report assembly and export

Builds the write-once ExportedReport from a report, its derived threat level
and the competitor it was requested for, and handles serialization to the
downloadable JSON artifact.
"""

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from loguru import logger

from models.agent_response import CIReport
from models.export import ExportedReport
from models.threat import ThreatLevel

WHITESPACE_RUN = re.compile(r"\s+")


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render a moment as UTC ISO-8601 with milliseconds, e.g. 2025-01-31T09:30:00.000Z"""
    return _as_utc(moment).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def report_filename(competitor_name: str, moment: datetime) -> str:
    """Filesystem-safe export name: CI-Report-<competitor>-<YYYY-MM-DD>.json"""
    safe_name = WHITESPACE_RUN.sub("-", competitor_name)
    export_date = _as_utc(moment).date().isoformat()
    return f"CI-Report-{safe_name}-{export_date}.json"


def assemble_report(
    competitor_name: str,
    timestamp: datetime,
    threat_level: ThreatLevel,
    report: CIReport
) -> ExportedReport:
    """
    Merge report identity with the report payload.

    Pure function of its inputs: the timestamp is sampled by the caller, once,
    and the report is carried over exactly as the orchestrator sent it,
    including keys that are not part of CIReport. Keys it never sent are not
    filled in.
    """
    payload = report.payload
    payload.update(
        competitor_name=competitor_name,
        timestamp=format_timestamp(timestamp),
        threat_level=threat_level,
    )
    return ExportedReport.model_validate(payload)


def serialize_report(exported: ExportedReport) -> str:
    """Indented, human-readable JSON text of an exported report"""
    return json.dumps(exported.model_dump(mode="json"), indent=2, ensure_ascii=False)


def save_report(exported: ExportedReport, directory: str, moment: Optional[datetime] = None) -> Path:
    """Write an exported report to directory under its derived filename"""
    moment = moment or datetime.fromisoformat(exported.timestamp.replace("Z", "+00:00"))

    output_dir = Path(directory)
    output_dir.mkdir(parents=True, exist_ok=True)

    path = output_dir / report_filename(exported.competitor_name, moment)
    path.write_text(serialize_report(exported), encoding="utf-8")

    logger.info(f"Saved report for {exported.competitor_name} to {path}")
    return path
