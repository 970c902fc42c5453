"""
Pydantic data models for pipeline output and API IO.
"""
from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Literal, Tuple

TickStatus = Literal["OK", "NO_FACE", "NO_FRAME", "ERROR"]


class BoundingBox(BaseModel):
    """Axis-aligned face region, origin at the frame's top-left corner."""
    model_config = ConfigDict(frozen=True)

    x: int = Field(ge=0)
    y: int = Field(ge=0)
    width: int = Field(gt=0)
    height: int = Field(gt=0)

    @property
    def area(self) -> int:
        return self.width * self.height

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return self.x, self.y, self.width, self.height


class ClassificationResult(BaseModel):
    label: str
    confidence: float = Field(ge=0.0, le=1.0)
    distribution: List[float] = Field(default_factory=list)


class TickResult(BaseModel):
    """Everything the renderer gets for one frame."""
    frame_index: int
    timestamp: float
    status: TickStatus
    candidates: List[BoundingBox] = Field(default_factory=list)
    primary: Optional[BoundingBox] = None
    result: Optional[ClassificationResult] = None
    error: Optional[str] = None
    latency_ms: float = 0.0


class LiveStatus(BaseModel):
    running: bool
    started_at: float | None = None
    ticks: int = 0
    last_tick: TickResult | None = None
    error: str | None = None
