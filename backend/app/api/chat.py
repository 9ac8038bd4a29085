import time
from fastapi import APIRouter, Depends

from app.api.deps import get_chat_proxy
from app.core.errors import ChatError
from app.models.schemas import ChatRequest, ChatResponse
from app.services.chat_proxy import ChatProxy
from app.utils.logger import (
    logger,
    log_operation_start,
    log_operation_end,
    log_performance,
)

router = APIRouter()


@router.post("", response_model=ChatResponse)
def chat(req: ChatRequest, proxy: ChatProxy = Depends(get_chat_proxy)):
    start_time = time.time()

    log_operation_start(
        "chat_turn",
        metadata={
            "model": req.model or proxy.default_model,
            "prompt_length": len(req.prompt or ""),
            "prompt_preview": (req.prompt or "")[:100],
        }
    )

    try:
        turn = proxy.build_turn(
            req.prompt,
            model=req.model,
            system=req.system,
            temperature=req.temperature,
            top_p=req.top_p,
            max_tokens=req.max_tokens,
        )
        reply = proxy.send(turn)
    except ChatError as e:
        log_performance(
            "chat_turn",
            (time.time() - start_time) * 1000,
            success=False,
            metadata={"status_code": e.status_code},
            error=e.message,
        )
        raise

    duration = (time.time() - start_time) * 1000
    log_operation_end(
        "chat_turn",
        duration,
        metadata={
            "model": turn.model_id,
            "reply_length": len(reply.text),
        }
    )
    logger.info(f"Chat turn completed with {turn.model_id}: {len(reply.text)} chars reply")

    return ChatResponse(reply=reply.text)
