import dataclasses
import json
import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union

import httpx
from pydantic import BaseModel

from ._utils import (
    RequestDescriptor,
    encode_multipart,
    encode_parameters,
    generate_boundary,
    set_header,
)
from .models.errors import (
    InvalidURLError,
    RequestBuildError,
    SerializationError,
    UnsupportedMethodError,
    UnsupportedOperationError,
)
from .models.http import HttpMethod, RequestBodyType, UploadFile

logger = logging.getLogger("acnetwork")

JSON_CONTENT_TYPE = "application/json"
# Form-data bodies and uploads use different media types. Both strings are exact.
FORM_DATA_CONTENT_TYPE = "application/form-data; boundary={boundary}"
UPLOAD_CONTENT_TYPE = "multipart/form-data; boundary={boundary}"


def _validate_url(url: str) -> str:
    if any(ch.isspace() or ord(ch) < 0x20 for ch in url):
        raise InvalidURLError(url)
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError):
        raise InvalidURLError(url) from None
    if not parsed.is_absolute_url or not parsed.host:
        raise InvalidURLError(url)
    return url


def _apply_headers(target: Dict[str, str], headers: Optional[Mapping[str, str]]) -> None:
    if headers:
        for name, value in headers.items():
            set_header(target, name, value)


def _serialize_object(obj: Any) -> bytes:
    if isinstance(obj, BaseModel):
        return obj.model_dump_json(by_alias=True).encode()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        obj = dataclasses.asdict(obj)
    return json.dumps(obj, separators=(",", ":"), allow_nan=False).encode()


class RequestFactory:
    """Builds ``RequestDescriptor`` values from request parameters.

    Every builder returns ``None`` when the request cannot be built and logs the
    reason on the ``acnetwork`` logger. Pass ``strict=True`` to have the typed
    ``RequestBuildError`` raised instead.

    Examples:
        >>> descriptor = RequestFactory.request(
        ...     "https://api.example.com/items",
        ...     parameters={"page": 2},
        ...     method=HttpMethod.GET,
        ... )
        >>> descriptor.url
        'https://api.example.com/items?page=2'
    """

    @staticmethod
    def request(
        path: str,
        parameters: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        method: Union[HttpMethod, str] = HttpMethod.GET,
        body_type: Union[RequestBodyType, str] = RequestBodyType.JSON,
        *,
        strict: bool = False,
    ) -> Optional[RequestDescriptor]:
        """Build a request from a parameter mapping.

        GET and HEAD render the parameters into the query string. POST, PUT, PATCH and
        DELETE put them in the body, encoded according to ``body_type``. Caller headers
        are applied last and override the derived ``Content-Type``.

        Args:
            path: Absolute URL of the request.
            parameters: Query or body parameters.
            headers: Extra headers.
            method: HTTP method.
            body_type: Body encoding for body-capable methods.
            strict: Raise build errors instead of logging them.

        Returns:
            Optional[RequestDescriptor]: The descriptor, or ``None`` if it could not be built.
        """

        def build() -> RequestDescriptor:
            http_method = HttpMethod.coerce(method)
            if http_method.is_query_only:
                return RequestFactory._query_request(
                    path, parameters, headers, http_method
                )
            if http_method.is_body_capable:
                return RequestFactory._body_request(
                    path, parameters, headers, http_method, body_type, strict
                )
            raise UnsupportedMethodError(http_method.value)

        return RequestFactory._build(build, strict)

    @staticmethod
    def request_with_object(
        path: str,
        obj: Any,
        headers: Optional[Mapping[str, str]] = None,
        method: Union[HttpMethod, str] = HttpMethod.POST,
        *,
        strict: bool = False,
    ) -> Optional[RequestDescriptor]:
        """Build a request whose JSON body is the serialized ``obj``.

        Pydantic models are dumped by alias, dataclasses through ``asdict`` and anything
        else through ``json``. Only POST, PUT, PATCH and DELETE are accepted.

        If ``obj`` cannot be serialized, the error is logged and the descriptor is still
        returned, without a body. With ``strict=True`` the ``SerializationError`` is raised.
        """

        def build() -> RequestDescriptor:
            http_method = HttpMethod.coerce(method)
            if http_method.is_query_only:
                raise UnsupportedOperationError(
                    http_method.value, "request with object parameters"
                )
            if not http_method.is_body_capable:
                raise UnsupportedMethodError(http_method.value)

            url = _validate_url(path)
            body: Optional[bytes] = None
            try:
                body = _serialize_object(obj)
            except (TypeError, ValueError) as e:
                RequestFactory._serialization_failed(
                    SerializationError("object", str(e)), strict
                )

            request_headers: Dict[str, str] = {}
            set_header(request_headers, "Content-Type", JSON_CONTENT_TYPE)
            _apply_headers(request_headers, headers)
            return RequestDescriptor(http_method, url, request_headers, body)

        return RequestFactory._build(build, strict)

    @staticmethod
    def upload(
        path: str,
        file_key: str,
        files: Iterable[UploadFile],
        parameters: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        *,
        strict: bool = False,
    ) -> Optional[RequestDescriptor]:
        """Build a multipart POST carrying ``parameters`` followed by ``files``.

        The multipart ``Content-Type`` is set after the caller headers so that its
        boundary always matches the body.
        """

        def build() -> RequestDescriptor:
            url = _validate_url(path)
            request_headers: Dict[str, str] = {}
            _apply_headers(request_headers, headers)

            boundary = generate_boundary()
            set_header(
                request_headers,
                "Content-Type",
                UPLOAD_CONTENT_TYPE.format(boundary=boundary),
            )
            body = encode_multipart(boundary, parameters, file_key, list(files))
            return RequestDescriptor(HttpMethod.POST, url, request_headers, body)

        return RequestFactory._build(build, strict)

    @staticmethod
    def _query_request(
        path: str,
        parameters: Optional[Mapping[str, Any]],
        headers: Optional[Mapping[str, str]],
        method: HttpMethod,
    ) -> RequestDescriptor:
        url = path
        query = encode_parameters(parameters)
        if query:
            url += ("&" if "?" in path else "?") + query
        url = _validate_url(url)

        request_headers: Dict[str, str] = {}
        _apply_headers(request_headers, headers)
        return RequestDescriptor(method, url, request_headers)

    @staticmethod
    def _body_request(
        path: str,
        parameters: Optional[Mapping[str, Any]],
        headers: Optional[Mapping[str, str]],
        method: HttpMethod,
        body_type: Union[RequestBodyType, str],
        strict: bool,
    ) -> RequestDescriptor:
        url = _validate_url(path)
        request_headers: Dict[str, str] = {}
        body: Optional[bytes] = None

        if RequestBodyType.coerce(body_type) is RequestBodyType.FORM_DATA:
            boundary = generate_boundary()
            if parameters is not None:
                body = encode_multipart(boundary, parameters)
            set_header(
                request_headers,
                "Content-Type",
                FORM_DATA_CONTENT_TYPE.format(boundary=boundary),
            )
        else:
            if parameters is not None:
                try:
                    body = json.dumps(
                        parameters, separators=(",", ":"), allow_nan=False
                    ).encode()
                except (TypeError, ValueError) as e:
                    RequestFactory._serialization_failed(
                        SerializationError("dictionary", str(e)), strict
                    )
            set_header(request_headers, "Content-Type", JSON_CONTENT_TYPE)

        _apply_headers(request_headers, headers)
        return RequestDescriptor(method, url, request_headers, body)

    @staticmethod
    def _serialization_failed(error: SerializationError, strict: bool) -> None:
        if strict:
            raise error
        logger.error(f"[RemoteFactory] - ERROR: {error.message}.")

    @staticmethod
    def _build(
        build: Callable[[], RequestDescriptor], strict: bool
    ) -> Optional[RequestDescriptor]:
        try:
            return build()
        except RequestBuildError as e:
            if strict:
                raise
            logger.error(f"[RemoteFactory] - ERROR: {e.message}.")
            return None
