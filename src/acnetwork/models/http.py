import mimetypes
from enum import Enum
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnsupportedBodyTypeError, UnsupportedMethodError

DEFAULT_MIME_TYPE = "application/octet-stream"


class HttpMethod(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"

    @classmethod
    def coerce(cls, method: Union["HttpMethod", str]) -> "HttpMethod":
        """Return ``method`` as an ``HttpMethod``, matching names case-insensitively.

        Raises:
            UnsupportedMethodError: If the name is not a known HTTP method.
        """
        if isinstance(method, HttpMethod):
            return method
        try:
            return cls(str(method).upper())
        except ValueError:
            raise UnsupportedMethodError(str(method)) from None

    @property
    def is_query_only(self) -> bool:
        return self in (HttpMethod.GET, HttpMethod.HEAD)

    @property
    def is_body_capable(self) -> bool:
        return self in (
            HttpMethod.POST,
            HttpMethod.PUT,
            HttpMethod.PATCH,
            HttpMethod.DELETE,
        )

    @property
    def is_supported(self) -> bool:
        return self.is_query_only or self.is_body_capable


class RequestBodyType(str, Enum):
    JSON = "json"
    FORM_DATA = "form_data"

    @classmethod
    def coerce(cls, body_type: Union["RequestBodyType", str]) -> "RequestBodyType":
        if isinstance(body_type, RequestBodyType):
            return body_type
        try:
            return cls(str(body_type).lower())
        except ValueError:
            raise UnsupportedBodyTypeError(str(body_type)) from None


class UploadFile(BaseModel):
    """A binary attachment embedded in a multipart body."""

    model_config = ConfigDict(
        populate_by_name=True,
        validate_by_alias=True,
        frozen=True,
    )

    data: bytes = Field(description="Raw file content")
    filename: str = Field(description="File name sent in the Content-Disposition")
    mime_type: Optional[str] = Field(
        default=None, alias="mimeType", description="MIME type of the content"
    )

    @property
    def content_type(self) -> str:
        """MIME type declared by the caller, else derived from the filename."""
        if self.mime_type:
            return self.mime_type
        guessed, _ = mimetypes.guess_type(self.filename)
        return guessed or DEFAULT_MIME_TYPE


class ResponseMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    status_code: int
    headers: Dict[str, str] = Field(default_factory=dict)
    url: Optional[str] = None


class RemoteResult(BaseModel):
    """Outcome of one executed request, as delivered to the completion."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    body: Optional[bytes] = None
    response: Optional[ResponseMetadata] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.response is not None

    @property
    def status_code(self) -> Optional[int]:
        return self.response.status_code if self.response is not None else None
