"""
Client-side geolocation sampler.

Consumes a continuous stream of device positions and forwards only the
samples that moved far enough and arrived late enough to the uploader.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import AsyncIterator, Callable, Optional

from ..config import LOCATION_MIN_DISTANCE_METERS, LOCATION_UPDATE_INTERVAL_SECONDS
from ..shared.geo import haversine_distance
from .uploader import LocationUploader, LocationUploadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Position:
    latitude: float
    longitude: float
    timestamp: float  # seconds
    accuracy: Optional[float] = None


class PositionSourceError(Exception):
    """The device stopped delivering positions (permission denied, timeout, unavailable)"""


class PermissionDeniedSourceError(PositionSourceError):
    pass


class PositionTimeoutError(PositionSourceError):
    pass


PositionWatch = Callable[[], AsyncIterator[Position]]


class LocationSampler:
    """
    Owns one watch task over a position source.

    A sample is uploaded when no sample has been accepted yet, or when it is at
    least minimum_distance meters and update_interval seconds away from the
    last accepted one. Upload failures are reported and skipped; a source
    failure ends tracking without retry.
    """

    def __init__(
        self,
        watch: PositionWatch,
        uploader: LocationUploader,
        minimum_distance: float = LOCATION_MIN_DISTANCE_METERS,
        update_interval: float = LOCATION_UPDATE_INTERVAL_SECONDS,
        share_accuracy: bool = True,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        self.watch = watch
        self.uploader = uploader
        self.minimum_distance = minimum_distance
        self.update_interval = update_interval
        self.share_accuracy = share_accuracy
        self.on_error = on_error

        self.last_error: Optional[str] = None
        self.last_accepted: Optional[Position] = None
        self.uploaded = 0
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    @property
    def is_tracking(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Begin watching; an existing watch is cancelled first"""
        async with self._lock:
            await self._cancel_task()
            self.last_error = None
            self._task = asyncio.create_task(self._run())
        logger.info("📍 Location tracking started")

    async def stop(self) -> None:
        async with self._lock:
            await self._cancel_task()
            self.last_accepted = None
        logger.info("📍 Location tracking stopped")

    async def join(self) -> None:
        """Wait for the watch to end on its own (source exhausted or failed)"""
        if self._task is not None:
            await self._task

    async def _cancel_task(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        try:
            async for position in self.watch():
                await self.handle_position(position)
        except PositionSourceError as e:
            self.last_error = str(e) or e.__class__.__name__
            logger.warning(f"⚠️ Position source failed, tracking stopped: {self.last_error}")
            self._report(e)
        except Exception as e:
            self.last_error = str(e) or e.__class__.__name__
            logger.exception(f"❌ Location tracking failed: {self.last_error}")
            self._report(e)

    def should_upload(self, position: Position) -> bool:
        last = self.last_accepted
        if last is None:
            return True

        distance = haversine_distance(
            last.latitude, last.longitude, position.latitude, position.longitude
        )
        if distance < self.minimum_distance:
            return False
        return position.timestamp - last.timestamp >= self.update_interval

    async def handle_position(self, position: Position) -> bool:
        """Filter one raw position and upload it if accepted; returns True when stored"""
        if not self.should_upload(position):
            return False

        accuracy = position.accuracy if self.share_accuracy else None
        try:
            await self.uploader.upload(position.latitude, position.longitude, accuracy)
        except LocationUploadError as e:
            self.last_error = str(e)
            self._report(e)
            return False

        self.last_accepted = position
        self.uploaded += 1
        return True

    def _report(self, error: Exception) -> None:
        if self.on_error is not None:
            self.on_error(error)

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()
