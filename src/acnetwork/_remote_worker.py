import asyncio
import threading
import uuid
from logging import getLogger
from typing import Any, Callable, Dict, Optional, Tuple

from ._config import RemoteConfiguration
from ._transport import CompletionHandler, HttpxTransport, Transport
from ._utils import RequestDescriptor
from .models.http import RemoteResult, ResponseMetadata


class _ActiveTask:
    __slots__ = ("handle", "task", "delivered")

    def __init__(self, handle: str) -> None:
        self.handle = handle
        self.task: Any = None
        self.delivered = False


class RemoteWorker:
    """Executes request descriptors and tracks them while they are in flight.

    Each ``execute`` call returns an opaque handle that stays registered until the
    transport reports an outcome. The completion is invoked exactly once per handle,
    whether the request succeeded, failed or was cancelled.

    Args:
        transport: Transport to send requests through. When omitted an
            ``HttpxTransport`` is created from ``configuration`` and owned by the worker.
        is_logging_enabled: Log request and response details. Defaults to the
            configuration value.
        configuration: Defaults source, read once. Defaults to
            ``RemoteConfiguration.shared()``.
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        *,
        is_logging_enabled: Optional[bool] = None,
        configuration: Optional[RemoteConfiguration] = None,
    ) -> None:
        self._logger = getLogger("acnetwork")
        configuration = configuration or RemoteConfiguration.shared()

        self.is_logging_enabled = (
            configuration.logging_enabled
            if is_logging_enabled is None
            else is_logging_enabled
        )

        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpxTransport(configuration)
        self._active_tasks: Dict[str, _ActiveTask] = {}
        self._lock = threading.Lock()

    @property
    def active_tasks(self) -> Tuple[str, ...]:
        """Snapshot of the handles currently in flight."""
        with self._lock:
            return tuple(self._active_tasks)

    def is_active(self, handle: str) -> bool:
        with self._lock:
            return handle in self._active_tasks

    def execute(
        self, descriptor: RequestDescriptor, completion: CompletionHandler
    ) -> str:
        """Start ``descriptor`` and return its handle without waiting for the response.

        Args:
            descriptor: The request to send.
            completion: Called once with ``(body, response, error)``. Transport errors,
                including cancellation, arrive through ``error``.

        Returns:
            str: The task handle, usable with ``cancel``.
        """
        with self._lock:
            handle = str(uuid.uuid4()).upper()
            while handle in self._active_tasks:
                handle = str(uuid.uuid4()).upper()
            entry = _ActiveTask(handle)
            self._active_tasks[handle] = entry

        def on_complete(
            body: Optional[bytes],
            response: Optional[ResponseMetadata],
            error: Optional[BaseException],
        ) -> None:
            self._complete(entry, descriptor, completion, body, response, error)

        try:
            entry.task = self._transport.start(descriptor, on_complete)
        except Exception:
            with self._lock:
                entry.delivered = True
                self._active_tasks.pop(handle, None)
            raise

        return handle

    def cancel(self, handle: str) -> None:
        """Request cancellation of ``handle``.

        Unknown, finished or already cancelled handles are ignored. The handle is
        retired once the transport reports the cancelled outcome.
        """
        with self._lock:
            entry = self._active_tasks.get(handle)
        if entry is None or entry.task is None:
            return

        if self.is_logging_enabled:
            self._logger.warning(f"[RemoteWorker] - WARNING: Task < {handle} > canceled")

        try:
            self._transport.cancel(entry.task)
        except Exception as e:
            self._logger.warning(
                f"[RemoteWorker] - WARNING: could not cancel task < {handle} >: {e}"
            )

    async def execute_async(self, descriptor: RequestDescriptor) -> RemoteResult:
        """Await the outcome of ``descriptor``.

        Cancelling the awaiting coroutine cancels the underlying task.

        Raises:
            TransportError: If the transport reports an error.
        """
        loop = asyncio.get_running_loop()
        future: "asyncio.Future[RemoteResult]" = loop.create_future()

        def resolve(result: RemoteResult) -> None:
            if not future.done():
                future.set_result(result)

        def completion(
            body: Optional[bytes],
            response: Optional[ResponseMetadata],
            error: Optional[BaseException],
        ) -> None:
            result = RemoteResult(body=body, response=response, error=error)
            try:
                loop.call_soon_threadsafe(resolve, result)
            except RuntimeError:
                # loop closed, nobody is awaiting the result anymore
                self._logger.debug(
                    f"[RemoteWorker] - dropped result for closed event loop: {descriptor.url}"
                )

        handle = self.execute(descriptor, completion)
        try:
            result = await future
        except asyncio.CancelledError:
            self.cancel(handle)
            raise

        if result.error is not None:
            raise result.error
        return result

    def close(self) -> None:
        """Close the transport if the worker created it."""
        if self._owns_transport:
            close: Optional[Callable[[], None]] = getattr(self._transport, "close", None)
            if close is not None:
                close()

    def __enter__(self) -> "RemoteWorker":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _complete(
        self,
        entry: _ActiveTask,
        descriptor: RequestDescriptor,
        completion: CompletionHandler,
        body: Optional[bytes],
        response: Optional[ResponseMetadata],
        error: Optional[BaseException],
    ) -> None:
        with self._lock:
            duplicate = entry.delivered
            entry.delivered = True
            if self._active_tasks.get(entry.handle) is entry:
                del self._active_tasks[entry.handle]

        if duplicate:
            self._logger.warning(
                f"[RemoteWorker] - WARNING: Task < {entry.handle} > completed more than once"
            )
            return

        if self.is_logging_enabled:
            try:
                self._log_exchange(descriptor, body, response)
            except Exception:
                self._logger.debug("[RemoteWorker] - could not log request details")

        completion(body, response, error)

    def _log_exchange(
        self,
        descriptor: RequestDescriptor,
        body: Optional[bytes],
        response: Optional[ResponseMetadata],
    ) -> None:
        self._logger.info(f"[RemoteWorker] - REQUEST URL: {descriptor.url}")
        self._logger.info(f"[RemoteWorker] - REQUEST HEADERS: {dict(descriptor.headers)}")
        if descriptor.text_body is not None:
            self._logger.info(f"[RemoteWorker] - REQUEST BODY: {descriptor.text_body}")

        if response is not None:
            self._logger.info(f"[RemoteWorker] - RESPONSE CODE: {response.status_code}")
            self._logger.info(f"[RemoteWorker] - RESPONSE HEADERS: {response.headers}")

        text: Optional[str] = None
        if body is not None:
            try:
                text = body.decode("utf-8")
            except UnicodeDecodeError:
                text = None
        data = text if text is not None else "UNKNOWN"
        self._logger.info(f"[RemoteWorker] - RESPONSE DATA: {data}")
