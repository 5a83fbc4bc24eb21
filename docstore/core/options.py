"""
Connection options for the document store.
"""

from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConnectionOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str
    user: str
    password: str = Field("", repr=False)
    database: str
    port: int = 5432
    timeout: float = 10.0
    on_lost: Optional[Callable[..., Any]] = None

    @field_validator('host', 'user', 'database')
    @classmethod
    def must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('must not be empty')
        return v

    @field_validator('port')
    @classmethod
    def port_must_be_valid(cls, v):
        if not 0 < v < 65536:
            raise ValueError('port must be between 1 and 65535')
        return v

    @field_validator('timeout')
    @classmethod
    def timeout_must_be_positive(cls, v):
        if v <= 0:
            raise ValueError('timeout must be positive')
        return v
