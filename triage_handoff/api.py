"""Thin FastAPI layer: decodes requests, calls TriageService, encodes JSON"""

from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request

from triage_handoff import config
from triage_handoff.database.base import DatabaseError
from triage_handoff.graph.builder import build_triage_service
from triage_handoff.models.domain import Conversation
from triage_handoff.models.schemas import (
    ChatRequest,
    ChatResponse,
    TriageRequest,
    TriageResult,
)
from triage_handoff.services.triage_service import (
    ConversationNotFoundError,
    InvalidRequestError,
    TriageService,
)
from triage_handoff.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["triage"])


def get_triage_service(request: Request) -> TriageService:
    return request.app.state.triage_service


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, service: TriageService = Depends(get_triage_service)):
    """
    Submit a message to a conversation.

    Starts a new conversation when conversation_id is omitted.
    """
    try:
        result = await service.submit_message(
            request.message,
            conversation_id=request.conversation_id,
            user_id=request.user_id,
        )
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConversationNotFoundError:
        raise HTTPException(status_code=404, detail="Conversation not found")
    except DatabaseError:
        raise HTTPException(status_code=500, detail="Failed to process message")

    return ChatResponse.from_turn(result)


@router.post("/triage", response_model=TriageResult)
async def triage(request: TriageRequest, service: TriageService = Depends(get_triage_service)):
    """Match symptoms to a specialty and an available specialist."""
    try:
        return await service.submit_symptoms(
            request.symptoms, conversation_id=request.conversation_id
        )
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DatabaseError:
        raise HTTPException(status_code=500, detail="Failed to triage symptoms")


@router.get("/conversations/{conversation_id}", response_model=Conversation)
async def get_conversation(
    conversation_id: str, service: TriageService = Depends(get_triage_service)
):
    try:
        return await service.get_conversation(conversation_id)
    except ConversationNotFoundError:
        raise HTTPException(status_code=404, detail="Conversation not found")
    except DatabaseError:
        raise HTTPException(status_code=500, detail="Failed to load conversation")


def create_app(service: TriageService | None = None) -> FastAPI:
    """
    Creates the API application.

    Args:
        service: Pre-built service; built from settings at startup when omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if service is None:
            app.state.triage_service = build_triage_service()
        else:
            app.state.triage_service = service
        logger.info("api_started")
        yield
        await app.state.triage_service.wait_for_background()
        logger.info("api_stopped")

    app = FastAPI(
        title="Triage Handoff",
        description="Patient chat with specialist triage and handoff",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)

    @app.get("/health")
    async def health():
        return {"status": "online"}

    return app


def serve() -> None:
    """Console entry point running the API with uvicorn."""
    import uvicorn

    settings = config.get_settings()
    configure_logging(level=settings.log_level, use_structured=settings.structured_logs)
    uvicorn.run(create_app(), host=settings.host, port=settings.port)
