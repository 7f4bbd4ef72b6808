"""Shared fakes for mood monitor tests."""

import asyncio

from mood_monitor.errors import CameraUnavailableError


class FakeSource:
    def __init__(self, name, frame=True):
        self.name = name
        self.frame = frame
        self.reads = 0
        self.released = False

    def read(self):
        self.reads += 1
        if self.released or not self.frame:
            return None
        return f"frame-{self.name}"

    def release(self):
        self.released = True


class FakeCamera:
    """Hands out numbered FakeSources, or fails like a denied camera."""

    def __init__(self, fail=False, frame=True):
        self.fail = fail
        self.frame = frame
        self.sources = []

    def acquire(self):
        if self.fail:
            raise CameraUnavailableError("permission denied")
        source = FakeSource(len(self.sources) + 1, frame=self.frame)
        self.sources.append(source)
        return source


class ScriptedClassifier:
    """
    Replays results in order: a dict is returned as scores, None means no
    face, an exception instance is raised. Once the script runs out the
    call blocks forever (so no further window can complete), or reports no
    face when ``hold`` is False.
    """

    def __init__(self, script=None, hold=True):
        self.script = list(script or [])
        self.hold = hold
        self.calls = []
        self.closed = False

    async def classify(self, frame):
        self.calls.append(frame)
        if not self.script:
            if self.hold:
                await asyncio.get_running_loop().create_future()
            return None
        result = self.script.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def close(self):
        self.closed = True


class Recorder:
    """Collects everything the monitor publishes."""

    def __init__(self):
        self.statuses = []
        self.payloads = []

    async def status(self, update):
        self.statuses.append(update)

    async def suggestions(self, payload):
        self.payloads.append(payload)

    def kinds(self):
        return [s.kind.value for s in self.statuses]


async def wait_until(predicate, timeout=5.0):
    """Yield to the loop until ``predicate()`` holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.005)


def scores(label, confidence=0.9):
    """Expression scores with ``label`` on top."""
    rest = (1.0 - confidence) / 6
    result = {name: rest for name in
              ("neutral", "happy", "sad", "angry", "fearful", "disgusted", "surprised")}
    result[label] = confidence
    return result
