import asyncio

import pytest

from fieldservice.tracking.sampler import (
    LocationSampler,
    PermissionDeniedSourceError,
    Position,
)
from fieldservice.tracking.uploader import LocationUploadError

# Roughly one meter of latitude
METER = 1 / 111_195


class RecordingUploader:
    def __init__(self, fail_times: int = 0):
        self.calls = []
        self.fail_times = fail_times

    async def upload(self, latitude, longitude, accuracy=None):
        if self.fail_times:
            self.fail_times -= 1
            raise LocationUploadError("Failed to update location", status_code=500)
        self.calls.append((latitude, longitude, accuracy))
        return {}


def watch_of(positions, error=None):
    def watch():
        async def stream():
            for position in positions:
                yield position
            if error is not None:
                raise error

        return stream()

    return watch


def hanging_watch():
    async def stream():
        await asyncio.Event().wait()
        yield  # pragma: no cover

    return stream()


async def test_small_moves_are_discarded_and_large_moves_uploaded():
    uploader = RecordingUploader()
    positions = [
        Position(latitude=10.0, longitude=20.0, timestamp=0),
        Position(latitude=10.0 + 5 * METER, longitude=20.0, timestamp=120),
        Position(latitude=10.0 + 50 * METER, longitude=20.0, timestamp=240),
    ]
    sampler = LocationSampler(watch_of(positions), uploader)

    await sampler.start()
    await sampler.join()

    assert [call[0] for call in uploader.calls] == [10.0, 10.0 + 50 * METER]
    assert sampler.uploaded == 2


async def test_samples_inside_the_interval_are_discarded():
    uploader = RecordingUploader()
    positions = [
        Position(latitude=0.0, longitude=0.0, timestamp=0),
        Position(latitude=100 * METER, longitude=0.0, timestamp=30),
        Position(latitude=200 * METER, longitude=0.0, timestamp=61),
    ]
    sampler = LocationSampler(watch_of(positions), uploader, update_interval=60)

    await sampler.start()
    await sampler.join()

    assert [call[0] for call in uploader.calls] == [0.0, 200 * METER]


async def test_failed_upload_is_not_the_reference_point():
    uploader = RecordingUploader(fail_times=1)
    errors = []
    positions = [
        Position(latitude=0.0, longitude=0.0, timestamp=0),
        Position(latitude=2 * METER, longitude=0.0, timestamp=100),
    ]
    sampler = LocationSampler(watch_of(positions), uploader, on_error=errors.append)

    await sampler.start()
    await sampler.join()

    # The first sample failed, so the second is the first accepted one
    assert uploader.calls == [(2 * METER, 0.0, None)]
    assert sampler.last_error == "Failed to update location"
    assert len(errors) == 1


async def test_source_error_stops_tracking():
    uploader = RecordingUploader()
    sampler = LocationSampler(
        watch_of([], error=PermissionDeniedSourceError("Location permission denied")), uploader
    )

    await sampler.start()
    await sampler.join()

    assert not sampler.is_tracking
    assert sampler.last_error == "Location permission denied"
    assert uploader.calls == []


async def test_accuracy_is_withheld_when_not_shared():
    uploader = RecordingUploader()
    positions = [Position(latitude=1.0, longitude=1.0, timestamp=0, accuracy=8.0)]

    sampler = LocationSampler(watch_of(positions), uploader, share_accuracy=False)
    await sampler.start()
    await sampler.join()

    assert uploader.calls == [(1.0, 1.0, None)]


async def test_start_replaces_the_existing_watch():
    sampler = LocationSampler(hanging_watch, RecordingUploader())

    await sampler.start()
    first_task = sampler._task
    await sampler.start()

    assert first_task.cancelled()
    assert sampler.is_tracking

    await sampler.stop()
    assert not sampler.is_tracking


async def test_overlapping_starts_leave_a_single_watch():
    sampler = LocationSampler(hanging_watch, RecordingUploader())

    await sampler.start()
    await asyncio.gather(sampler.start(), sampler.start())
    assert sampler.is_tracking

    await sampler.stop()

    running = [
        task
        for task in asyncio.all_tasks()
        if not task.done()
        and getattr(task.get_coro(), "__qualname__", "") == "LocationSampler._run"
    ]
    assert running == []
    assert not sampler.is_tracking


async def test_unexpected_error_is_recorded_and_reported():
    class BrokenUploader:
        async def upload(self, latitude, longitude, accuracy=None):
            raise RuntimeError("connection pool closed")

    errors = []
    positions = [Position(latitude=0.0, longitude=0.0, timestamp=0)]
    sampler = LocationSampler(watch_of(positions), BrokenUploader(), on_error=errors.append)

    await sampler.start()
    await sampler.join()

    assert not sampler.is_tracking
    assert sampler.last_error == "connection pool closed"
    assert len(errors) == 1
    assert isinstance(errors[0], RuntimeError)



async def test_context_manager_stops_and_clears_reference():
    sampler = LocationSampler(hanging_watch, RecordingUploader())
    sampler.last_accepted = Position(latitude=0.0, longitude=0.0, timestamp=0)

    async with sampler:
        assert sampler.is_tracking

    assert not sampler.is_tracking
    assert sampler.last_accepted is None


@pytest.mark.parametrize("distance,expected", [(9.0, False), (11.0, True)])
def test_distance_threshold(distance, expected):
    sampler = LocationSampler(hanging_watch, RecordingUploader(), minimum_distance=10)
    sampler.last_accepted = Position(latitude=0.0, longitude=0.0, timestamp=0)

    candidate = Position(latitude=distance * METER, longitude=0.0, timestamp=3600)
    assert sampler.should_upload(candidate) is expected
