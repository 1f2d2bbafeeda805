import asyncio
import logging
import math
from enum import Enum

from ..schemas import DEFAULT_TITLE, ActivityEntry, ActivityForm, EmissionEstimate
from .emissions import (
    DecodingError,
    EmissionsError,
    EmissionsService,
    InvalidResponse,
    InvalidURL,
    MissingApiKey,
)
from .entry_store import EntryStore

logger = logging.getLogger(__name__)

INVALID_DISTANCE_MESSAGE = "Please enter a valid number for distance."


class SubmissionStatus(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    ERROR = "error"


class SubmissionError(Exception):
    pass


class InvalidDistance(SubmissionError):
    def __init__(self, raw: str):
        super().__init__(INVALID_DISTANCE_MESSAGE)
        self.raw = raw


class SubmissionInProgress(SubmissionError):
    def __init__(self):
        super().__init__("An estimate is already being calculated.")


class SubmissionCancelled(SubmissionError):
    def __init__(self):
        super().__init__("Submission was cancelled.")


def parse_distance(raw: str) -> float:
    """Parse user-typed kilometers; only finite positive numbers are accepted."""
    try:
        value = float(raw.strip())
    except (AttributeError, ValueError):
        raise InvalidDistance(raw)

    if not math.isfinite(value) or value <= 0:
        raise InvalidDistance(raw)
    return value


def user_message(error: Exception) -> str:
    """One-line message shown to the user for a failed estimate."""
    if isinstance(error, InvalidResponse):
        return "Invalid response from server. Check logs for details."
    if isinstance(error, DecodingError):
        return "Error processing data. Check logs for details."
    if isinstance(error, InvalidURL):
        return "Invalid request URL. Please try again."
    if isinstance(error, MissingApiKey):
        return "Emissions API key is not configured."
    if isinstance(error, SubmissionError):
        return str(error)
    return f"Failed to fetch emissions: {error}"


class ActivitySubmission:
    """
    The "add trip" flow: validate input, estimate once, store the entry.

    Only one estimate may be in flight at a time. ``cancel`` aborts the network
    call and discards its result.
    """

    def __init__(self, service: EmissionsService, store: EntryStore):
        self.service = service
        self.store = store
        self.status = SubmissionStatus.IDLE
        self.error_message: str | None = None
        self._task: asyncio.Task | None = None
        self._cancelled: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> bool:
        return self.status == SubmissionStatus.IN_FLIGHT

    def _fail(self, message: str) -> None:
        self.status = SubmissionStatus.ERROR
        self.error_message = message

    def reset(self) -> None:
        if not self.in_flight:
            self.status = SubmissionStatus.IDLE
            self.error_message = None

    def cancel(self) -> bool:
        if not self.in_flight or self._task is None:
            return False

        self._cancelled.add(self._task)
        self._task.cancel()
        self._task = None
        self.status = SubmissionStatus.IDLE
        self.error_message = None
        logger.info("Cancelled in-flight estimate")
        return True

    async def _estimate(self, distance_km: float, form: ActivityForm) -> EmissionEstimate:
        task = asyncio.ensure_future(self.service.estimate(distance_km, form.mode))
        self._task = task
        try:
            estimate = await task
        except BaseException:
            # covers both the cancellation itself and a failure that raced it
            if task in self._cancelled:
                raise SubmissionCancelled()
            raise
        else:
            # cancel() may land after the response arrived; the result is discarded
            if task in self._cancelled:
                raise SubmissionCancelled()
            return estimate
        finally:
            self._cancelled.discard(task)
            if self._task is task:
                self._task = None

    async def submit(self, form: ActivityForm) -> ActivityEntry:
        if self.in_flight:
            raise SubmissionInProgress()

        self.error_message = None

        try:
            distance_km = parse_distance(form.distance)
        except InvalidDistance as exc:
            self._fail(str(exc))
            raise

        self.status = SubmissionStatus.IN_FLIGHT

        try:
            estimate = await self._estimate(distance_km, form)
        except SubmissionCancelled:
            raise
        except asyncio.CancelledError:
            self.status = SubmissionStatus.IDLE
            raise
        except EmissionsError as exc:
            if isinstance(exc, DecodingError):
                logger.error("Decoding error details: %s", exc.details)
            logger.error("EmissionsError: %r", exc)
            self._fail(user_message(exc))
            raise
        except Exception as exc:
            logger.exception("Estimate failed: %s", exc)
            self._fail(user_message(exc))
            raise

        entry = ActivityEntry(
            title=form.title.strip() or DEFAULT_TITLE,
            mode=form.mode,
            distance_km=distance_km,
            emission_kg=estimate.co2e,
        )
        self.store.add(entry)
        self.status = SubmissionStatus.IDLE
        return entry
