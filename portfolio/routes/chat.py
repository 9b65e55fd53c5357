from fastapi import APIRouter, Depends, Request

from portfolio.deps import get_admission_gate, get_chat_relay
from portfolio.errors import RateLimited
from portfolio.routes.common import parse_model, read_json
from portfolio.schemas.chat import ChatRequest
from portfolio.services.admission import AdmissionGate
from portfolio.services.chat_relay import ChatRelay, SSEResponse
from portfolio.services.conversation_store import ClientMeta
from portfolio.utils.logger import logger
from portfolio.utils.security import client_ip
from portfolio.utils.user_agent import parse_user_agent

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat")
async def chat(
    request: Request,
    gate: AdmissionGate = Depends(get_admission_gate),
    relay: ChatRelay = Depends(get_chat_relay),
):
    """Portfolio chatbot: streams the assistant's answer as server-sent events."""
    ip = client_ip(request)
    if not gate.check_rate(ip):
        raise RateLimited(retry_after=gate.retry_after(ip))

    chat_request = parse_model(ChatRequest, await read_json(request))
    logger.info(f"Chat request for session {chat_request.session_id} ({len(chat_request.messages)} messages)")

    user_agent = request.headers.get("user-agent")
    info = parse_user_agent(user_agent)
    meta = ClientMeta(
        ip_address=ip,
        user_agent=user_agent,
        device=info.device,
        browser=info.browser,
        os=info.os,
    )

    turn = await relay.open(chat_request, meta)
    return SSEResponse(relay.events(turn), turn.stream)
