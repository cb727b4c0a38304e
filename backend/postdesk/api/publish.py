from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import ValidationError as PydanticValidationError
from starlette.concurrency import run_in_threadpool

from postdesk.core.config import settings
from postdesk.publishing.client import WRITER_KEY_HEADER
from postdesk.publishing.errors import ConfigurationError, UnknownError, ValidationError
from postdesk.publishing.service import PublishService, check_writer_key
from postdesk.schemas.publish import PublishErrorResponse, PublishRequest, PublishResponse


router = APIRouter(prefix="/api", tags=["publish"])


@router.post(
    "/publish",
    response_model=PublishResponse,
    responses={
        400: {"model": PublishErrorResponse},
        401: {"model": PublishErrorResponse},
        500: {"model": PublishErrorResponse},
    },
)
async def publish_post(request: Request):
    # Order matters: configuration, then the writer key, then the body.
    if not settings.GITHUB_TOKEN:
        raise ConfigurationError()
    check_writer_key(request.headers.get(WRITER_KEY_HEADER), settings.WRITER_KEY)

    try:
        body = await request.json()
    except Exception as exc:
        raise UnknownError(str(exc)) from exc
    try:
        payload = PublishRequest.model_validate(body)
    except PydanticValidationError as exc:
        # Wrong-typed fields answer the same as missing ones.
        raise ValidationError() from exc

    service = PublishService.from_settings(settings)
    outcome = await run_in_threadpool(service.publish, payload.filename, payload.content, payload.message)
    return outcome.to_payload()
