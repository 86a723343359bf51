from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from minisnap_core.errors import InvalidRenderer


class RendererKind(StrEnum):
    MARKDOWN = "markdown"
    HTML = "html"


def parse_renderer(raw: str | RendererKind) -> RendererKind:
    """Return the renderer kind for ``raw`` or raise InvalidRenderer."""

    if isinstance(raw, RendererKind):
        return raw
    try:
        return RendererKind(raw)
    except ValueError:
        raise InvalidRenderer(str(raw)) from None


class Entry(BaseModel):
    """A stored piece of content.

    On disk the slug is written as ``identifier``; records that still use the
    older ``slug`` key are read as well.
    """

    model_config = ConfigDict(frozen=True)

    slug: str = Field(
        validation_alias=AliasChoices("identifier", "slug"),
        serialization_alias="identifier",
    )
    renderer: RendererKind
    raw: str
    description: str = Field(default="")
    created_at: datetime
    updated_at: datetime

    @property
    def was_updated(self) -> bool:
        return self.updated_at != self.created_at

    def to_record(self) -> bytes:
        return (self.model_dump_json(by_alias=True, indent=2) + "\n").encode("utf-8")

    @classmethod
    def from_record(cls, data: bytes) -> Entry:
        return cls.model_validate_json(data)


@dataclass(frozen=True)
class Draft:
    """Unsaved content, e.g. for preview."""

    renderer: RendererKind
    raw: str
