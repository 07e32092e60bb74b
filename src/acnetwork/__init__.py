"""acnetwork: request descriptors, body encoders and an in-flight task worker."""

from ._config import RemoteConfiguration
from ._remote_worker import RemoteWorker
from ._request_factory import RequestFactory
from ._transport import CompletionHandler, HttpxTransport, Transport
from ._utils import (
    RequestDescriptor,
    encode_multipart,
    encode_parameters,
    generate_boundary,
)
from .models import (
    HttpMethod,
    InvalidURLError,
    RemoteError,
    RemoteResult,
    RequestBodyType,
    RequestBuildError,
    ResponseMetadata,
    SerializationError,
    TaskCancelledError,
    TransportError,
    UnsupportedBodyTypeError,
    UnsupportedMethodError,
    UnsupportedOperationError,
    UploadFile,
)

__all__ = [
    "CompletionHandler",
    "HttpMethod",
    "HttpxTransport",
    "InvalidURLError",
    "RemoteConfiguration",
    "RemoteError",
    "RemoteResult",
    "RemoteWorker",
    "RequestBodyType",
    "RequestBuildError",
    "RequestDescriptor",
    "RequestFactory",
    "ResponseMetadata",
    "SerializationError",
    "TaskCancelledError",
    "Transport",
    "TransportError",
    "UnsupportedBodyTypeError",
    "UnsupportedMethodError",
    "UnsupportedOperationError",
    "UploadFile",
    "encode_multipart",
    "encode_parameters",
    "generate_boundary",
]
