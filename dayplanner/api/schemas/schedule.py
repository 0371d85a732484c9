"""Schemas for the weekly schedule API."""
from __future__ import annotations

from typing import Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class TaskPayload(BaseModel):
    id: str
    text: str
    done: bool


class BlockPayload(BaseModel):
    start: int
    span: int
    tasks: List[TaskPayload]


class DayScheduleResponse(BaseModel):
    user_id: UUID
    day: str
    blocks: List[BlockPayload]
    changed: bool = False
    request_id: str


class WeeklyScheduleResponse(BaseModel):
    user_id: UUID
    days: Dict[str, List[BlockPayload]]
    request_id: str


class UpcomingBlocksResponse(BaseModel):
    user_id: UUID
    day: str
    minute: int
    current_index: int
    blocks: List[BlockPayload]
    request_id: str


class ScheduleActionRequest(BaseModel):
    user_id: UUID


class CustomBlockRequest(ScheduleActionRequest):
    text: str = Field(..., min_length=1, max_length=100, description='Time range such as "9:30 - 10:15pm"')


class ApplyAllRequest(ScheduleActionRequest):
    mode: Literal["replace", "append"] = "replace"


class ResetDayRequest(ScheduleActionRequest):
    confirm: bool = False


class TaskCreateRequest(ScheduleActionRequest):
    text: str = Field(..., min_length=1, max_length=500)


class TaskPatchRequest(ScheduleActionRequest):
    text: Optional[str] = Field(default=None, max_length=500)
    done: Optional[bool] = None

    @model_validator(mode="after")
    def _require_change(self) -> "TaskPatchRequest":
        if self.text is None and self.done is None:
            raise ValueError("Provide text and/or done")
        return self

    def patch(self) -> Dict[str, object]:
        return {key: value for key, value in (("text", self.text), ("done", self.done)) if value is not None}
