"""Placeholder question-answering endpoints.

No model is wired in yet: ``/ask`` echoes the question back in a stub answer
and ``/health`` reports the module as not ready.
"""

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from assistant.api.schemas import AskRequest, AskResponse, AssistantHealthResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/ask-ai", tags=["ask-ai"])

STUB_MODEL = "stub"


@router.post("/ask", response_model=AskResponse)
async def ask(body: AskRequest):
    question = (body.question or "").strip()
    if not question:
        return JSONResponse(status_code=400, content={"error": "question is required"})

    logger.info("question_received", length=len(question))
    return AskResponse(answer=f'[stub] Received your question: "{question}"', model=STUB_MODEL, usage=None)


@router.get("/health", response_model=AssistantHealthResponse)
async def health() -> AssistantHealthResponse:
    return AssistantHealthResponse(status="ok", module="askAI", ready=False)
