from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    service: str
    graphql_configured: bool
    image_allowed_hosts: list[str] = Field(default_factory=list)
