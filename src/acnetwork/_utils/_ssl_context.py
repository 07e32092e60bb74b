import os
import ssl
from typing import TYPE_CHECKING, Any, Dict

import certifi
import httpx

if TYPE_CHECKING:
    from .._config import RemoteConfiguration


def expand_path(path):
    """Expand environment variables and user home directory in path."""
    if not path:
        return path
    path = os.path.expandvars(path)
    path = os.path.expanduser(path)
    return path


def create_ssl_context() -> ssl.SSLContext:
    ssl_cert_file = expand_path(os.environ.get("SSL_CERT_FILE"))
    requests_ca_bundle = expand_path(os.environ.get("REQUESTS_CA_BUNDLE"))
    ssl_cert_dir = expand_path(os.environ.get("SSL_CERT_DIR"))

    return ssl.create_default_context(
        cafile=ssl_cert_file or requests_ca_bundle or certifi.where(),
        capath=ssl_cert_dir,
    )


def get_httpx_client_kwargs(configuration: "RemoteConfiguration") -> Dict[str, Any]:
    """Build ``httpx.AsyncClient`` keyword arguments from a configuration."""
    return {
        "verify": create_ssl_context() if configuration.verify_ssl else False,
        "timeout": httpx.Timeout(configuration.timeout),
        "follow_redirects": configuration.follow_redirects,
        "limits": httpx.Limits(
            max_connections=configuration.max_connections,
            max_keepalive_connections=configuration.max_keepalive_connections,
        ),
    }
