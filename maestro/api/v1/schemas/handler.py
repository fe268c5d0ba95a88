"""Response schemas for the handler introspection endpoint."""

from pydantic import BaseModel


class HandlerInfo(BaseModel):
    """Public-facing description of a single registered handler."""

    name: str
    role: str
    skills: list[str]
    description: str
    version: str


class HandlersListResponse(BaseModel):
    handlers: list[HandlerInfo]
    total: int
