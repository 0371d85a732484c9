"""Weekly schedule API routes."""
from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Callable, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from dayplanner.api.schemas.schedule import (
    ApplyAllRequest,
    BlockPayload,
    CustomBlockRequest,
    DayScheduleResponse,
    ResetDayRequest,
    ScheduleActionRequest,
    TaskCreateRequest,
    TaskPatchRequest,
    UpcomingBlocksResponse,
    WeeklyScheduleResponse,
)
from dayplanner.core.config import settings
from dayplanner.db.deps import get_db
from dayplanner.observability.metrics import log_metric
from dayplanner.observability.tracing import trace
from dayplanner.services.errors import BlockNotFoundError, InvalidRangeError, UnknownDayError
from dayplanner.services.partition import DAYS, Partition, block_at, find_current_block_index, replace_block, upcoming_window
from dayplanner.services.propagation import apply_block_to_all_days
from dayplanner.services.range_splicer import splice_text_range
from dayplanner.services.schedule_store import load_user_schedule, save_user_schedule
from dayplanner.services.slot_merger import merge_adjacent, split_slot
from dayplanner.services.task_ledger import add_task, remove_task, update_task
from dayplanner.services.weekly_schedule import WeeklySchedule

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/schedule", response_model=WeeklyScheduleResponse, tags=["schedule"])
def get_weekly_schedule(
    http_request: Request,
    user_id: UUID = Query(..., description="User ID owning the schedule"),
    db: Session = Depends(get_db),
) -> WeeklyScheduleResponse:
    """Return all seven days."""
    request_id = getattr(http_request.state, "request_id", None)
    with trace("schedule.get", metadata={"route": "/schedule"}, user_id=str(user_id), request_id=request_id):
        schedule = load_user_schedule(db, user_id)

    return WeeklyScheduleResponse(
        user_id=user_id,
        days={name: _serialize_blocks(schedule.day(name)) for name in DAYS},
        request_id=request_id or "",
    )


@router.get("/schedule/{day}", response_model=DayScheduleResponse, tags=["schedule"])
def get_day_schedule(
    day: str,
    http_request: Request,
    user_id: UUID = Query(..., description="User ID owning the schedule"),
    db: Session = Depends(get_db),
) -> DayScheduleResponse:
    day_name = _resolve_day(day)
    request_id = getattr(http_request.state, "request_id", None)
    with trace("schedule.get_day", metadata={"day": day_name}, user_id=str(user_id), request_id=request_id):
        schedule = load_user_schedule(db, user_id)

    return DayScheduleResponse(
        user_id=user_id,
        day=day_name,
        blocks=_serialize_blocks(schedule.day(day_name)),
        request_id=request_id or "",
    )


@router.get("/schedule/{day}/upcoming", response_model=UpcomingBlocksResponse, tags=["schedule"])
def get_upcoming_blocks(
    day: str,
    http_request: Request,
    user_id: UUID = Query(..., description="User ID owning the schedule"),
    minute: int = Query(0, ge=0, description="Minute of day; pass the current minute for today"),
    size: Optional[int] = Query(default=None, ge=1, le=24),
    db: Session = Depends(get_db),
) -> UpcomingBlocksResponse:
    """Compact view: the block holding ``minute`` and the ones right after it."""
    day_name = _resolve_day(day)
    request_id = getattr(http_request.state, "request_id", None)
    window_size = size or settings.upcoming_window_size
    with trace(
        "schedule.upcoming",
        metadata={"day": day_name, "minute": minute, "size": window_size},
        user_id=str(user_id),
        request_id=request_id,
    ):
        partition = load_user_schedule(db, user_id).day(day_name)
        current_index = find_current_block_index(partition, minute)
        blocks = upcoming_window(partition, minute, window_size)

    return UpcomingBlocksResponse(
        user_id=user_id,
        day=day_name,
        minute=minute,
        current_index=current_index,
        blocks=_serialize_blocks(blocks),
        request_id=request_id or "",
    )


@router.post("/schedule/{day}/blocks/{index}/merge", response_model=DayScheduleResponse, tags=["schedule"])
def merge_block(
    day: str,
    index: int,
    payload: ScheduleActionRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> DayScheduleResponse:
    """Merge block ``index`` with the block after it."""
    return _mutate_day(
        db,
        http_request,
        user_id=payload.user_id,
        day=day,
        action="merge",
        metadata={"index": index},
        mutate=lambda partition: merge_adjacent(partition, _existing_index(partition, index)),
    )


@router.post("/schedule/{day}/blocks/{index}/split", response_model=DayScheduleResponse, tags=["schedule"])
def split_block(
    day: str,
    index: int,
    payload: ScheduleActionRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> DayScheduleResponse:
    """Split one base unit off the front of block ``index``."""
    return _mutate_day(
        db,
        http_request,
        user_id=payload.user_id,
        day=day,
        action="split",
        metadata={"index": index, "base_unit": settings.base_unit_minutes},
        mutate=lambda partition: split_slot(
            partition, _existing_index(partition, index), settings.base_unit_minutes
        ),
    )


@router.post("/schedule/{day}/blocks/custom", response_model=DayScheduleResponse, tags=["schedule"])
def create_custom_block(
    day: str,
    payload: CustomBlockRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> DayScheduleResponse:
    """Carve a free-text range such as ``"1:05pm - 2:20pm"`` out of the day."""
    return _mutate_day(
        db,
        http_request,
        user_id=payload.user_id,
        day=day,
        action="custom_block",
        metadata={"text": payload.text},
        mutate=lambda partition: splice_text_range(partition, payload.text),
    )


@router.post("/schedule/{day}/blocks/{index}/apply-all", response_model=WeeklyScheduleResponse, tags=["schedule"])
def apply_block_to_week(
    day: str,
    index: int,
    payload: ApplyAllRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> WeeklyScheduleResponse:
    """Copy a block's time range (and tasks) onto every day of the week."""
    day_name = _resolve_day(day)
    request_id = getattr(http_request.state, "request_id", None)
    metadata: Dict[str, Any] = {
        "route": f"/schedule/{day_name}/blocks/{index}/apply-all",
        "day": day_name,
        "index": index,
        "mode": payload.mode,
    }

    start_time = perf_counter()
    try:
        with trace("schedule.apply_all", metadata=metadata, user_id=str(payload.user_id), request_id=request_id):
            schedule = load_user_schedule(db, payload.user_id)
            source = block_at(schedule.day(day_name), index)
            updated = apply_block_to_all_days(schedule, day_name, index, payload.mode)
            save_user_schedule(
                db,
                payload.user_id,
                updated,
                action_type="schedule_apply_all",
                day=day_name,
                payload={
                    "index": index,
                    "mode": payload.mode,
                    "start": source.start,
                    "span": source.span,
                    "task_count": len(source.tasks),
                    "request_id": request_id,
                },
            )
    except BlockNotFoundError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except Exception:
        db.rollback()
        raise

    latency_ms = (perf_counter() - start_time) * 1000
    log_metric("schedule.apply_all.success", 1, metadata={"user_id": str(payload.user_id), "mode": payload.mode})
    log_metric("schedule.apply_all.latency_ms", latency_ms, metadata={"user_id": str(payload.user_id)})

    return WeeklyScheduleResponse(
        user_id=payload.user_id,
        days={name: _serialize_blocks(updated.day(name)) for name in DAYS},
        request_id=request_id or "",
    )


@router.post("/schedule/{day}/reset", response_model=DayScheduleResponse, tags=["schedule"])
def reset_day(
    day: str,
    payload: ResetDayRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> DayScheduleResponse:
    """Reset a day to hourly blocks. Discards every task of that day."""
    if not payload.confirm:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Resetting a day clears all of its tasks; resend with confirm=true",
        )
    return _mutate_day(
        db,
        http_request,
        user_id=payload.user_id,
        day=day,
        action="reset",
        metadata={},
        mutate=None,
    )


@router.post("/schedule/{day}/blocks/{index}/tasks", response_model=DayScheduleResponse, tags=["tasks"])
def create_task(
    day: str,
    index: int,
    payload: TaskCreateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> DayScheduleResponse:
    text = payload.text.strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Task text is empty")
    return _mutate_day(
        db,
        http_request,
        user_id=payload.user_id,
        day=day,
        action="task_added",
        metadata={"index": index, "text_length": len(text)},
        mutate=lambda partition: replace_block(partition, index, add_task(block_at(partition, index), text)),
    )


@router.patch("/schedule/{day}/blocks/{index}/tasks/{task_id}", response_model=DayScheduleResponse, tags=["tasks"])
def patch_task(
    day: str,
    index: int,
    task_id: str,
    payload: TaskPatchRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> DayScheduleResponse:
    patch = payload.patch()
    return _mutate_day(
        db,
        http_request,
        user_id=payload.user_id,
        day=day,
        action="task_updated",
        metadata={"index": index, "task_id": task_id, "fields": sorted(patch)},
        mutate=lambda partition: _replace_if_changed(
            partition, index, update_task(block_at(partition, index), task_id, patch)
        ),
    )


@router.delete("/schedule/{day}/blocks/{index}/tasks/{task_id}", response_model=DayScheduleResponse, tags=["tasks"])
def delete_task(
    day: str,
    index: int,
    task_id: str,
    http_request: Request,
    user_id: UUID = Query(..., description="User ID owning the schedule"),
    db: Session = Depends(get_db),
) -> DayScheduleResponse:
    return _mutate_day(
        db,
        http_request,
        user_id=user_id,
        day=day,
        action="task_removed",
        metadata={"index": index, "task_id": task_id},
        mutate=lambda partition: _replace_if_changed(
            partition, index, remove_task(block_at(partition, index), task_id)
        ),
    )


def _mutate_day(
    db: Session,
    http_request: Request,
    *,
    user_id: UUID,
    day: str,
    action: str,
    metadata: Dict[str, Any],
    mutate: Optional[Callable[[Partition], Partition]],
) -> DayScheduleResponse:
    """Load, derive a new partition for one day, persist it if it changed.

    ``mutate=None`` means reset the day to its default shape.
    """
    day_name = _resolve_day(day)
    request_id = getattr(http_request.state, "request_id", None)
    trace_metadata = {"route": http_request.url.path, "day": day_name, **metadata}

    start_time = perf_counter()
    try:
        with trace(f"schedule.{action}", metadata=trace_metadata, user_id=str(user_id), request_id=request_id):
            schedule = load_user_schedule(db, user_id)
            current = schedule.day(day_name)
            if mutate is None:
                updated: WeeklySchedule = schedule.reset_day(day_name)
                changed = True
            else:
                updated = schedule.with_day(day_name, mutate(current))
                changed = updated is not schedule
            if changed:
                save_user_schedule(
                    db,
                    user_id,
                    updated,
                    action_type=f"schedule_{action}",
                    day=day_name,
                    payload={**metadata, "request_id": request_id},
                )
    except InvalidRangeError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    except (BlockNotFoundError, UnknownDayError) as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except ValueError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    except Exception:
        db.rollback()
        raise

    latency_ms = (perf_counter() - start_time) * 1000
    log_metric(f"schedule.{action}.success", 1, metadata={"user_id": str(user_id), "day": day_name})
    log_metric(f"schedule.{action}.changed", 1 if changed else 0, metadata={"user_id": str(user_id)})
    log_metric(f"schedule.{action}.latency_ms", latency_ms, metadata={"day": day_name})
    if not changed:
        logger.debug("schedule.%s on %s left the day unchanged", action, day_name)

    return DayScheduleResponse(
        user_id=user_id,
        day=day_name,
        blocks=_serialize_blocks(updated.day(day_name)),
        changed=changed,
        request_id=request_id or "",
    )


def _resolve_day(day: str) -> str:
    for name in DAYS:
        if name.lower() == day.lower():
            return name
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown day: {day}")


def _existing_index(partition: Partition, index: int) -> int:
    block_at(partition, index)
    return index


def _replace_if_changed(partition: Partition, index: int, block) -> Partition:
    if block is partition[index]:
        return partition
    return replace_block(partition, index, block)


def _serialize_blocks(blocks: Partition) -> List[BlockPayload]:
    return [
        BlockPayload(
            start=block.start,
            span=block.span,
            tasks=[{"id": task.id, "text": task.text, "done": task.done} for task in block.tasks],
        )
        for block in blocks
    ]
