from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_shared_configuration: Optional["RemoteConfiguration"] = None


class RemoteConfiguration(BaseSettings):
    """Defaults consumed by ``RemoteWorker`` at construction time.

    Values are read from ``ACNETWORK_*`` environment variables. A worker reads its
    configuration once; changing it afterwards only affects workers created later.
    """

    model_config = SettingsConfigDict(env_prefix="ACNETWORK_", extra="ignore")

    logging_enabled: bool = Field(
        default=False, description="Log request and response details"
    )
    timeout: Optional[float] = Field(
        default=60.0, description="Transport timeout in seconds, None to disable"
    )
    verify_ssl: bool = True
    follow_redirects: bool = True
    max_connections: int = 100
    max_keepalive_connections: int = 20

    @classmethod
    def shared(cls) -> "RemoteConfiguration":
        """Process-wide configuration, loaded from the environment on first use."""
        global _shared_configuration
        if _shared_configuration is None:
            _shared_configuration = cls()
        return _shared_configuration

    @classmethod
    def set_shared(cls, configuration: "RemoteConfiguration") -> None:
        global _shared_configuration
        _shared_configuration = configuration

    @classmethod
    def reset_shared(cls) -> None:
        global _shared_configuration
        _shared_configuration = None
