from ._multipart import encode_multipart, generate_boundary
from ._parameters import encode_parameters, render_value
from ._request_spec import RequestDescriptor, set_header
from ._ssl_context import get_httpx_client_kwargs

__all__ = [
    "RequestDescriptor",
    "encode_multipart",
    "encode_parameters",
    "generate_boundary",
    "get_httpx_client_kwargs",
    "render_value",
    "set_header",
]
