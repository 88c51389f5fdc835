from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import logging
from pydantic import BaseModel, Field

from assistant.core.roles import get_role, list_roles
from assistant.errors import ConfigurationError, RemoteServiceError
from assistant.llm import to_transcript
from assistant.registry import SessionRegistry
from assistant.session import ConversationSession
from config.settings import get_settings


settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="[%(asctime)s] %(levelname)s - %(message)s",
)
logger = logging.getLogger("gemini_role_chat")

app = FastAPI(title="Gemini Role Chat", version="1.0.0")

# CORS: allow local frontend during development
if settings.app_env.lower() in {"dev", "development", "local"}:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

_registry = SessionRegistry(
    factory=ConversationSession,
    max_sessions=settings.max_sessions,
    idle_timeout=settings.session_idle_timeout,
)


def get_registry() -> SessionRegistry:
    return _registry


class RoleRequest(BaseModel):
    client_id: str = Field(..., description="Unique identifier for user/conversation")
    role: Optional[str] = Field(None, description="Free-text system role; blank clears it")
    role_name: Optional[str] = Field(None, description="Name of a predefined role")


class AskRequest(BaseModel):
    client_id: str = Field(..., description="Unique identifier for user/conversation")
    question: str = Field(..., description="User's latest message")


def _session_state(client_id: str, session: ConversationSession) -> Dict[str, Any]:
    return {
        "client_id": client_id,
        "system_role": session.system_role,
        "history": to_transcript(session.messages),
    }


def _configuration_failure(e: ConfigurationError) -> HTTPException:
    logger.error("Session could not be created: %s", e)
    return HTTPException(status_code=500, detail=str(e))


@app.get("/roles")
def roles() -> List[Dict[str, str]]:
    return list_roles()


@app.post("/chat/role")
def set_role(req: RoleRequest, registry: SessionRegistry = Depends(get_registry)) -> Dict[str, Any]:
    role = req.role
    if req.role_name:
        try:
            role = get_role(req.role_name)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown role: {req.role_name}")

    try:
        with registry.checkout(req.client_id) as session:
            session.set_system_role(role)
            logger.info(
                "Role set: client_id=%s role_name=%s active=%s",
                req.client_id,
                req.role_name,
                session.system_role is not None,
            )
            return _session_state(req.client_id, session)
    except ConfigurationError as e:
        raise _configuration_failure(e)


@app.post("/chat")
def chat(req: AskRequest, registry: SessionRegistry = Depends(get_registry)) -> Dict[str, Any]:
    try:
        with registry.checkout(req.client_id) as session:
            logger.info(
                "Incoming question: client_id=%s question_len=%s history=%s",
                req.client_id,
                len(req.question),
                len(session),
            )
            answer = session.ask(req.question)
    except ConfigurationError as e:
        raise _configuration_failure(e)
    except RemoteServiceError as e:
        logger.warning("Model call failed for client_id=%s: %s", req.client_id, e)
        raise HTTPException(status_code=502, detail=str(e))

    logger.info("Model responded: %s chars", len(answer))
    return {"answer": answer}


@app.get("/chat/{client_id}/history")
def history(client_id: str, registry: SessionRegistry = Depends(get_registry)) -> Dict[str, Any]:
    with registry.checkout(client_id, create=False) as session:
        if session is None:
            raise HTTPException(status_code=404, detail=f"No conversation for {client_id}")
        return _session_state(client_id, session)


@app.post("/chat/{client_id}/reset")
def reset(client_id: str, registry: SessionRegistry = Depends(get_registry)) -> Dict[str, Any]:
    try:
        session = registry.renew(client_id)
    except ConfigurationError as e:
        raise _configuration_failure(e)
    return _session_state(client_id, session)


@app.delete("/chat/{client_id}")
def close(client_id: str, registry: SessionRegistry = Depends(get_registry)) -> Dict[str, Any]:
    if not registry.drop(client_id):
        raise HTTPException(status_code=404, detail=f"No conversation for {client_id}")
    return {"client_id": client_id, "closed": True}


@app.get("/health")
def health():
    return {"status": "ok"}
