"""Options that control how GPX documents are decoded."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from .timefmt import DEFAULT_TIME_LAYOUTS


class ReadOptions(BaseModel):
    """Decode-time options. Encoding output never depends on these."""

    model_config = ConfigDict(frozen=True)

    time_layouts: list[str] = list(DEFAULT_TIME_LAYOUTS)
    encoding: str | None = None  # None = BOM / XML declaration / UTF-8

    @field_validator("time_layouts", mode="before")
    @classmethod
    def _wrap_single_layout(cls, value):
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("time_layouts")
    @classmethod
    def _require_layouts(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("at least one time layout is required")
        return value

    def with_time_layout(self, layout: str) -> ReadOptions:
        """Return a copy that parses timestamps with ``layout`` only."""
        return self.with_time_layouts(layout)

    def with_time_layouts(self, *layouts: str) -> ReadOptions:
        """Return a copy that tries ``layouts`` in order."""
        return ReadOptions(time_layouts=list(layouts), encoding=self.encoding)
