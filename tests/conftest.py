import sys
import threading
from pathlib import Path
from typing import Any, Callable, Generator, List, Optional

import pytest

# Ensure local source package (src/acnetwork) is importable before tests collect
_PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
_SRC_PATH: Path = _PROJECT_ROOT / "src"
if _SRC_PATH.exists():
    sys.path.insert(0, str(_SRC_PATH))

from acnetwork import (  # noqa: E402
    RemoteConfiguration,
    RemoteWorker,
    RequestDescriptor,
    ResponseMetadata,
    TaskCancelledError,
)


class FakeTask:
    def __init__(
        self, descriptor: RequestDescriptor, on_complete: Callable[..., None]
    ) -> None:
        self.descriptor = descriptor
        self.on_complete = on_complete

    def succeed(self, body: bytes = b"", status_code: int = 200, **headers: str):
        self.on_complete(
            body,
            ResponseMetadata(
                status_code=status_code, headers=headers, url=self.descriptor.url
            ),
            None,
        )

    def fail(self, error: BaseException) -> None:
        self.on_complete(None, None, error)


class FakeTransport:
    """In-memory transport; tests decide when and how each task completes."""

    def __init__(self, complete_on_cancel: bool = True) -> None:
        self.tasks: List[FakeTask] = []
        self.cancelled: List[FakeTask] = []
        self.complete_on_cancel = complete_on_cancel
        self._lock = threading.Lock()

    def start(self, descriptor: RequestDescriptor, on_complete) -> FakeTask:
        task = FakeTask(descriptor, on_complete)
        with self._lock:
            self.tasks.append(task)
        return task

    def cancel(self, task: FakeTask) -> None:
        with self._lock:
            self.cancelled.append(task)
        if self.complete_on_cancel:
            task.fail(TaskCancelledError(task.descriptor.url))

    @property
    def last(self) -> FakeTask:
        return self.tasks[-1]


class CompletionRecorder:
    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.event = threading.Event()
        self._lock = threading.Lock()

    def __call__(
        self,
        body: Optional[bytes],
        response: Optional[ResponseMetadata],
        error: Optional[BaseException],
    ) -> None:
        with self._lock:
            self.calls.append((body, response, error))
        self.event.set()

    def wait(self, timeout: float = 5.0) -> Any:
        assert self.event.wait(timeout), "completion was not invoked"
        return self.calls[0]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clean environment variables and shared configuration before each test."""
    monkeypatch.delenv("ACNETWORK_LOGGING_ENABLED", raising=False)
    monkeypatch.delenv("ACNETWORK_TIMEOUT", raising=False)
    RemoteConfiguration.reset_shared()
    yield
    RemoteConfiguration.reset_shared()


@pytest.fixture
def configuration() -> RemoteConfiguration:
    return RemoteConfiguration(logging_enabled=False, timeout=5.0)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def worker(transport: FakeTransport, configuration: RemoteConfiguration) -> RemoteWorker:
    return RemoteWorker(transport, configuration=configuration)


@pytest.fixture
def recorder() -> CompletionRecorder:
    return CompletionRecorder()


@pytest.fixture
def manual_transport() -> FakeTransport:
    """Transport that only records cancellation; completion stays with the test."""
    return FakeTransport(complete_on_cancel=False)
