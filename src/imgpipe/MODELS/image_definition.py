"""
Models representing a single entry of the image catalog.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, field_validator


class ImageDefinition(BaseModel):
    """
    One build configuration of the image family: a template rendered for a
    given version and branch, optionally stopping at a multi-stage target.

    The first tag is the canonical name of the built image, the remaining
    tags are aliases it is also published under.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    version: str
    template: str
    branch: str
    target: Optional[str] = None
    tags: List[str]
    configure: Optional[str] = None
    patches: Optional[str] = None

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value):
        # YAML reads `version: 27.1` as a float
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value):
        if isinstance(value, (list, tuple)):
            return [str(tag) if isinstance(tag, (int, float)) and not isinstance(tag, bool) else tag
                    for tag in value]
        return value

    @field_validator("tags")
    @classmethod
    def _require_tags(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("at least one tag is required")
        return value

    @property
    def directory(self) -> str:
        """Build context directory, relative to the project root."""
        return f"{self.version}/{self.template}"

    @property
    def dockerfile_path(self) -> str:
        return f"{self.directory}/Dockerfile"

    @property
    def canonical_tag(self) -> str:
        return self.tags[0]

    @property
    def aliases(self) -> List[str]:
        return self.tags[1:]
