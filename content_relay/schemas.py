from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GraphQLRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    query: str
    variables: dict[str, Any] | None = None
    operation_name: str | None = Field(default=None, alias="operationName")


class ErrorEnvelope(BaseModel):
    error: str
    message: str | None = None
    details: str | None = None
