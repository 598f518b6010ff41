"""Pydantic request/response schemas for the question-answering API."""

from pydantic import BaseModel


class AskRequest(BaseModel):
    question: str | None = None


class AskResponse(BaseModel):
    answer: str
    model: str
    usage: dict | None = None


class AssistantHealthResponse(BaseModel):
    status: str
    module: str
    ready: bool
