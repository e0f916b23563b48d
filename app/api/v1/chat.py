import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from app.api.v1.identity import get_current_user_id
from app.api.v1.schemas import ChatRequestSchema, ChatResponseSchema, ConfirmActionRequestSchema, ErrorSchema
from app.application.dto.action_result import ConfirmOutcome
from app.application.exceptions import LLMContractError, LLMUpstreamError
from app.application.use_cases.handle_chat import HandleChatUseCase
from app.wiring.dependencies import get_handle_chat_use_case

router = APIRouter(prefix="/api/chat")
logger = logging.getLogger(__name__)


@router.post("", response_model=ChatResponseSchema)
def chat(
    req: ChatRequestSchema,
    user_id: str = Depends(get_current_user_id),
    uc: HandleChatUseCase = Depends(get_handle_chat_use_case),
):
    try:
        response = uc.handle(user_id, req.question)
    except (LLMUpstreamError, LLMContractError) as e:
        logger.warning("Intent extraction failed", extra={"user_id": user_id, "error": str(e)})
        raise HTTPException(status_code=502, detail=str(e))

    payload = response.to_payload()
    payload["userName"] = user_id
    return ChatResponseSchema.model_validate(payload)


@router.post("/confirmAction", responses={400: {"model": ErrorSchema}, 500: {"model": ErrorSchema}})
def confirm_action(
    req: ConfirmActionRequestSchema,
    user_id: str = Depends(get_current_user_id),
    uc: HandleChatUseCase = Depends(get_handle_chat_use_case),
) -> JSONResponse:
    result = uc.confirm(user_id, req.confirm)

    if result.outcome is ConfirmOutcome.no_pending_action:
        status_code = 400
    elif result.outcome is ConfirmOutcome.failed:
        status_code = 500
    else:
        status_code = 200
    return JSONResponse(status_code=status_code, content=result.to_payload())
