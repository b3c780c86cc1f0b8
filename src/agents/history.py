"""
Artifact Version History
Immutable version records kept by callers between requests.
"""

from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from core import is_version_id, new_version_id
from .models import GenerationResult


class ArtifactVersion(BaseModel):
    """One generated artifact, as shown in a version picker."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_version_id)
    code: str
    timestamp: str
    explanation: str = ""
    components: tuple[str, ...] = ()
    prompt: str = ""

    @classmethod
    def from_result(cls, result: GenerationResult, prompt: str) -> "ArtifactVersion":
        return cls(
            code=result.code,
            timestamp=result.timestamp,
            explanation=result.explanation,
            components=tuple(result.components),
            prompt=prompt,
        )


def record_version(
    versions: Sequence[ArtifactVersion], version: ArtifactVersion, reset: bool
) -> tuple[ArtifactVersion, ...]:
    """
    New history with ``version`` first.

    A reset discards everything before it.
    """
    if reset:
        return (version,)
    return (version, *versions)


def find_version(versions: Sequence[ArtifactVersion], version_id: str) -> Optional[ArtifactVersion]:
    """Version with ``version_id``; anything but a version id matches nothing."""
    if not is_version_id(version_id):
        return None
    return next((v for v in versions if v.id == version_id), None)
