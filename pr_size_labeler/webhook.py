"""GitHub webhook ingestion."""

from __future__ import annotations

import time
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from starlette.requests import ClientDisconnect

from pr_size_labeler.config import Settings
from pr_size_labeler.dependencies import processor_dependency, settings_dependency
from pr_size_labeler.logger import get_logger, log_failure, log_success, log_with_context
from pr_size_labeler.models.events import parse_webhook_event
from pr_size_labeler.services.event_filter import (
    SKIP_REPOSITORY_NOT_CONFIGURED,
    SKIP_UNSUPPORTED_EVENT,
    should_process,
)
from pr_size_labeler.services.size_processor import SizeLabelProcessor, SizeLabelProcessorError
from pr_size_labeler.utils.security import build_github_signature, verify_github_signature

router = APIRouter()

logger = get_logger()

SIGNATURE_HEADER = "X-Hub-Signature"
EVENT_HEADER = "X-GitHub-Event"
DELIVERY_HEADER = "X-GitHub-Delivery"


@router.post("/webhook", summary="Receive GitHub webhooks")
async def receive_webhook(
    request: Request,
    settings: Settings = Depends(settings_dependency),
    processor: SizeLabelProcessor = Depends(processor_dependency),
) -> Dict[str, str]:
    """Verify the signature, filter the event and label the pull request."""

    start_time = time.time()
    delivery_id = request.headers.get(DELIVERY_HEADER)
    event_type = request.headers.get(EVENT_HEADER)
    ctx_logger = log_with_context(logger, delivery_id=delivery_id, event_type=event_type)

    signature = request.headers.get(SIGNATURE_HEADER)
    if not signature:
        log_failure(logger, f"Missing {SIGNATURE_HEADER} header", delivery_id=delivery_id, event_type=event_type)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Missing {SIGNATURE_HEADER}")

    try:
        raw_body = await request.body()
    except ClientDisconnect as exc:
        log_failure(logger, "Failed to read request body", exc, delivery_id=delivery_id, event_type=event_type)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Malformed body") from exc

    if not verify_github_signature(settings.github_shared_secret, raw_body, signature):
        expected = build_github_signature(settings.github_shared_secret, raw_body)
        log_failure(
            logger,
            f"Expected signature {expected!r}, but got {signature!r}",
            delivery_id=delivery_id,
            event_type=event_type,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Validating payload against signature failed",
        )

    try:
        event = parse_webhook_event(event_type, raw_body)
    except ValueError as exc:
        log_failure(logger, "Failed to parse body", exc, delivery_id=delivery_id, event_type=event_type)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Malformed body") from exc

    decision = should_process(event, settings.repo_spec)
    if not decision.proceed:
        if decision.reason == SKIP_REPOSITORY_NOT_CONFIGURED:
            ctx_logger.warning(f"Rejected event for unconfigured repository (configured: {settings.repo_spec})")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not configured for this repository",
            )
        ctx_logger.debug(f"Webhook ignored: {decision.reason}")
        if decision.reason == SKIP_UNSUPPORTED_EVENT:
            return {"message": "Skipping event type"}
        return {"message": "Skipping action"}

    try:
        result = await processor(event, delivery_id=delivery_id)
    except SizeLabelProcessorError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error processing request ({exc.step})",
        ) from exc

    processing_time = time.time() - start_time
    log_success(
        logger,
        f"Processed {event.pull_request_id} in {processing_time:.3f}s",
        delivery_id=delivery_id,
        event_type=event_type,
    )
    response = {"message": "Success"}
    if result.label:
        response["label"] = result.label
    return response
