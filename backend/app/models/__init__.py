"""Database models."""

from backend.app.models.session import Session
from backend.app.models.transcript import TranscriptSegment
from backend.app.models.report import SessionReport

__all__ = ["Session", "TranscriptSegment", "SessionReport"]
