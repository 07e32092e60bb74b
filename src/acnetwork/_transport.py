"""Transport boundary: the only place where network I/O happens."""

import asyncio
import threading
from concurrent.futures import Future
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

import httpx

from ._config import RemoteConfiguration
from ._utils import RequestDescriptor, get_httpx_client_kwargs
from .models.errors import TaskCancelledError, TransportError
from .models.http import ResponseMetadata

CompletionHandler = Callable[
    [Optional[bytes], Optional[ResponseMetadata], Optional[BaseException]], None
]


class Transport(Protocol):
    """Performs requests and reports their outcome.

    ``start`` must not block. ``on_complete`` is called exactly once per started task,
    from whatever context the transport uses, including after ``cancel``.
    """

    def start(self, descriptor: RequestDescriptor, on_complete: CompletionHandler) -> Any:
        """Start sending ``descriptor`` and return a task reference."""
        ...

    def cancel(self, task: Any) -> None:
        """Ask the transport to abort ``task``; best effort."""
        ...


class HttpxTransport:
    """Transport backed by ``httpx.AsyncClient``.

    Requests run on a private event loop owned by a daemon thread, so ``start`` can be
    called from synchronous code and completions are delivered from that thread.
    Non-2xx responses are delivered as responses, not errors.
    """

    def __init__(
        self,
        configuration: Optional[RemoteConfiguration] = None,
        *,
        event_hooks: Optional[Dict[str, List[Callable[..., Any]]]] = None,
    ) -> None:
        configuration = configuration or RemoteConfiguration.shared()
        client_kwargs = get_httpx_client_kwargs(configuration)
        if event_hooks:
            client_kwargs["event_hooks"] = event_hooks

        self._client = httpx.AsyncClient(**client_kwargs)
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._loop.run_forever, name="acnetwork-transport", daemon=True
        )
        self._thread.start()
        self._closed = False

    def start(
        self, descriptor: RequestDescriptor, on_complete: CompletionHandler
    ) -> Future:
        if self._closed:
            raise RuntimeError("transport is closed")

        future = asyncio.run_coroutine_threadsafe(self._send(descriptor), self._loop)
        future.add_done_callback(
            lambda done: self._deliver(descriptor, done, on_complete)
        )
        return future

    def cancel(self, task: Future) -> None:
        task.cancel()

    def close(self) -> None:
        """Cancel outstanding requests, close the client and stop the loop."""
        if self._closed:
            return
        self._closed = True

        asyncio.run_coroutine_threadsafe(self._shutdown(), self._loop).result()
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join()
        self._loop.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    async def _send(
        self, descriptor: RequestDescriptor
    ) -> Tuple[bytes, ResponseMetadata]:
        try:
            response = await self._client.request(
                descriptor.method.value,
                descriptor.url,
                headers=dict(descriptor.headers),
                content=descriptor.body,
            )
        except httpx.HTTPError as e:
            raise TransportError(
                f"{type(e).__name__}: {e}", url=descriptor.url
            ) from e

        metadata = ResponseMetadata(
            status_code=response.status_code,
            headers=dict(response.headers),
            url=str(response.url),
        )
        return response.content, metadata

    async def _shutdown(self) -> None:
        current = asyncio.current_task()
        pending = [task for task in asyncio.all_tasks() if task is not current]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        await self._client.aclose()

    @staticmethod
    def _deliver(
        descriptor: RequestDescriptor, future: Future, on_complete: CompletionHandler
    ) -> None:
        if future.cancelled():
            on_complete(None, None, TaskCancelledError(descriptor.url))
            return

        error = future.exception()
        if error is not None:
            on_complete(None, None, error)
            return

        body, metadata = future.result()
        on_complete(body, metadata, None)
