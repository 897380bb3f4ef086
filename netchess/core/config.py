"""Session settings (who hosts, where to connect)"""

from enum import StrEnum

from pydantic import BaseModel, field_validator

from netchess.core.exceptions import InvalidConfigError

DEFAULT_PORT = 8080


class Role(StrEnum):
    HOST = "host"
    JOIN = "join"


class SessionConfig(BaseModel):
    """How this process takes part in the game. The host always plays white, the joiner black."""

    role: Role
    host: str = ""
    port: int = DEFAULT_PORT

    @field_validator("port")
    @classmethod
    def validate_port(cls, value: int) -> int:
        if not 0 < value < 65536:
            raise InvalidConfigError(f"Port {value} is not in 1-65535.")
        return value

    @field_validator("host")
    @classmethod
    def validate_host(cls, value: str) -> str:
        return value.strip()

    @property
    def address(self) -> tuple[str, int]:
        return self.host, self.port

