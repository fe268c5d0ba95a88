"""Data models for the handler registry."""

from pydantic import BaseModel

from maestro.core.task.models import QualityLevel


class HandlerMetadata(BaseModel):
    """Identity and declared capabilities of a specialist handler."""

    name: str
    role: str
    skills: list[str]
    quality_standards: dict[QualityLevel, str] = {}
    description: str = ""
    version: str = "1.0.0"
