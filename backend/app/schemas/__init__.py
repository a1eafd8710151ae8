"""Pydantic schemas for report artifacts and API responses."""

from backend.app.schemas.report import (
    ReportArtifact,
    TabsReportArtifact,
    GenerationStatusResponse,
    TriggerResponse,
)

__all__ = [
    "ReportArtifact",
    "TabsReportArtifact",
    "GenerationStatusResponse",
    "TriggerResponse",
]
