import logging
import uuid
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import ValidationError

from ..schemas import (
    DEFAULT_COLOR,
    ActivityColor,
    ActivityEntry,
    ActivityForm,
    ActivityListResponse,
    ActivityUpdate,
    ActivityView,
    PaletteResponse,
    SubmissionStateResponse,
    TotalResponse,
)
from ..services.emissions import EmissionsError
from ..services.entry_store import EntryStore
from ..services.formatting import format_distance, format_emission, format_total
from ..services.submission import (
    ActivitySubmission,
    InvalidDistance,
    SubmissionCancelled,
    SubmissionInProgress,
    user_message,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/activities", tags=["activities"])


def get_store(request: Request) -> EntryStore:
    return request.app.state.store


def get_submission(request: Request) -> ActivitySubmission:
    return request.app.state.submission


def _to_view(entry: ActivityEntry) -> ActivityView:
    return ActivityView(
        **entry.model_dump(),
        mode_display=entry.mode.display_name,
        distance_display=format_distance(entry.distance_km),
        emission_display=format_emission(entry.emission_kg),
    )


def _submission_state(submission: ActivitySubmission) -> SubmissionStateResponse:
    return SubmissionStateResponse(
        status=submission.status.value,
        error_message=submission.error_message,
    )


@router.get("", response_model=ActivityListResponse)
async def list_activities(store: EntryStore = Depends(get_store)) -> ActivityListResponse:
    total = store.total()
    return ActivityListResponse(
        entries=[_to_view(entry) for entry in store.entries()],
        total_kg=total,
        total_display=format_total(total),
    )


@router.post("", response_model=ActivityView, status_code=status.HTTP_201_CREATED)
async def add_activity(
    form: ActivityForm,
    submission: ActivitySubmission = Depends(get_submission),
) -> ActivityView:
    try:
        entry = await submission.submit(form)
    except InvalidDistance as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except (SubmissionInProgress, SubmissionCancelled) as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except EmissionsError as exc:
        raise HTTPException(status_code=502, detail=user_message(exc))
    except Exception as exc:
        logger.exception("Unexpected failure adding activity: %s", exc)
        raise HTTPException(status_code=502, detail=user_message(exc))

    return _to_view(entry)


@router.get("/total", response_model=TotalResponse)
async def get_total(store: EntryStore = Depends(get_store)) -> TotalResponse:
    total = store.total()
    return TotalResponse(total_kg=total, total_display=format_total(total))


@router.get("/colors", response_model=PaletteResponse)
async def list_colors() -> PaletteResponse:
    return PaletteResponse(colors=list(ActivityColor), default=DEFAULT_COLOR)


@router.get("/submission", response_model=SubmissionStateResponse)
async def get_submission_state(
    submission: ActivitySubmission = Depends(get_submission),
) -> SubmissionStateResponse:
    return _submission_state(submission)


@router.delete("/submission", response_model=SubmissionStateResponse)
async def cancel_submission(
    submission: ActivitySubmission = Depends(get_submission),
) -> SubmissionStateResponse:
    if not submission.cancel():
        submission.reset()
    return _submission_state(submission)


@router.get("/export", response_model=List[ActivityEntry])
async def export_activities(store: EntryStore = Depends(get_store)) -> List[dict[str, Any]]:
    return store.export()


@router.post("/import", response_model=ActivityListResponse)
async def import_activities(
    items: List[dict[str, Any]],
    store: EntryStore = Depends(get_store),
) -> ActivityListResponse:
    try:
        store.load(items)
    except ValidationError as exc:
        logger.warning("Rejected activity import: %s", exc)
        raise HTTPException(status_code=422, detail="Invalid activity data")

    return await list_activities(store)


@router.patch("/{entry_id}", response_model=ActivityView)
async def update_activity(
    entry_id: uuid.UUID,
    changes: ActivityUpdate,
    store: EntryStore = Depends(get_store),
) -> ActivityView:
    entry = store.update(entry_id, changes)
    if entry is None:
        raise HTTPException(status_code=404, detail="Activity not found")
    return _to_view(entry)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_activity(entry_id: uuid.UUID, store: EntryStore = Depends(get_store)) -> Response:
    store.remove(entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
