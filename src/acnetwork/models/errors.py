from typing import Optional


class RemoteError(Exception):
    """Base class for every error raised or delivered by acnetwork."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class RequestBuildError(RemoteError):
    """Raised when a request descriptor cannot be built.

    The factory reports these through the ``acnetwork`` logger and returns ``None``
    unless it is called with ``strict=True``.
    """


class InvalidURLError(RequestBuildError):
    def __init__(self, url: str):
        self.url = url
        super().__init__(f"could not create a valid URL from '{url}'")


class UnsupportedMethodError(RequestBuildError):
    def __init__(self, method: str):
        self.method = method
        super().__init__(f"method {method} is not supported")


class UnsupportedBodyTypeError(RequestBuildError):
    def __init__(self, body_type: str):
        self.body_type = body_type
        super().__init__(f"body type {body_type} is not supported")


class UnsupportedOperationError(RequestBuildError):
    def __init__(self, method: str, operation: str):
        self.method = method
        self.operation = operation
        super().__init__(
            f"{operation} does not support the {method} method. "
            "Please use dictionary parameters instead."
        )


class SerializationError(RequestBuildError):
    def __init__(self, subject: str, reason: str):
        self.subject = subject
        self.reason = reason
        super().__init__(f"could not serialize {subject}, {reason}")


class TransportError(RemoteError):
    """Raised by a transport when a started request cannot produce a response.

    Delivered to completion callbacks unchanged; never raised by ``execute``.
    """

    def __init__(self, message: str, *, url: Optional[str] = None):
        self.url = url
        super().__init__(message)


class TaskCancelledError(TransportError):
    """Delivered when a running task was cancelled before it produced a response."""

    def __init__(self, url: Optional[str] = None):
        super().__init__("task was cancelled", url=url)
