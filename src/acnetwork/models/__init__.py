from .errors import (
    InvalidURLError,
    RemoteError,
    RequestBuildError,
    SerializationError,
    TaskCancelledError,
    TransportError,
    UnsupportedBodyTypeError,
    UnsupportedMethodError,
    UnsupportedOperationError,
)
from .http import (
    HttpMethod,
    RemoteResult,
    RequestBodyType,
    ResponseMetadata,
    UploadFile,
)

__all__ = [
    "HttpMethod",
    "InvalidURLError",
    "RemoteError",
    "RemoteResult",
    "RequestBodyType",
    "RequestBuildError",
    "ResponseMetadata",
    "SerializationError",
    "TaskCancelledError",
    "TransportError",
    "UnsupportedBodyTypeError",
    "UnsupportedMethodError",
    "UnsupportedOperationError",
    "UploadFile",
]
