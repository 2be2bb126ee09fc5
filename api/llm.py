"""
LLM Task Router

Four endpoints, one pipeline:
  validate (pydantic, 400) → assemble prompt → infer → normalize → respond

Security:
  - Rate limited per client address (router dependency, 429)
  - Failure responses carry a generic message only: no provider body,
    no credential, no raw model text
"""

import logging
from typing import Any, Mapping

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from inference import ErrorKind, GenerationOptions, InferenceClient
from normalization import ParseFailure, normalize
from prompting import TASK_LABELS, Task, build_inference_request

from .dependencies import enforce_rate_limit, get_generation_options, get_inference_client
from .schemas import DraftRequest, GuardrailRequest, RewriteRequest, SimilarityRequest

# Setup logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(
    prefix="/api/llm",
    tags=["llm"],
    dependencies=[Depends(enforce_rate_limit)],
)


def _failure(task: Task) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": f"{TASK_LABELS[task]} failed"})


async def run_task(
    task: Task,
    payload: Mapping[str, Any],
    client: InferenceClient,
    options: GenerationOptions,
):
    """
    Run one task end to end.

    Returns:
        camelCase output dict on success, or a 500 JSONResponse
    """
    request = build_inference_request(task, payload, options)
    result = await client.infer(request)

    if not result.ok:
        logger.error(
            f"{TASK_LABELS[task]} inference failed: {result.error_kind.value}",
            extra={
                "task": task.value,
                "error_kind": result.error_kind.value,
                "status_code": result.status_code,
                "attempts": result.attempts,
                "detail": result.detail,
            },
        )
        return _failure(task)

    output = normalize(result.text, task)
    if isinstance(output, ParseFailure):
        logger.error(
            f"{TASK_LABELS[task]} output rejected: {output.reason}",
            extra={
                "task": task.value,
                "error_kind": ErrorKind.PARSE_FAILURE.value,
                "reason": output.reason,
                "missing_fields": output.missing_fields,
            },
        )
        logger.debug(f"Rejected {task.value} output: {output.raw}")
        return _failure(task)

    return output.to_response()


@router.post("/rewrite")
async def rewrite(
    body: RewriteRequest,
    client: InferenceClient = Depends(get_inference_client),
    options: GenerationOptions = Depends(get_generation_options),
):
    """
    Rewrite text so it reads as naturally human-written.

    Expected payload:
    {"text": "...", "targetMode": "Formal", "constraints": "...", "audience": "General"}

    Returns:
        {"rewritten": "...", "changes": [...], "riskFlags": [...]}
    """
    return await run_task(Task.REWRITE, body.to_payload(), client, options)


@router.post("/draft")
async def draft(
    body: DraftRequest,
    client: InferenceClient = Depends(get_inference_client),
    options: GenerationOptions = Depends(get_generation_options),
):
    """Draft from the given sources only. Returns {"outline", "draft", "citations"}."""
    return await run_task(Task.DRAFT, body.to_payload(), client, options)


@router.post("/similarity")
async def similarity(
    body: SimilarityRequest,
    client: InferenceClient = Depends(get_inference_client),
    options: GenerationOptions = Depends(get_generation_options),
):
    """Flag segments too close to a source passage."""
    return await run_task(Task.SIMILARITY, body.to_payload(), client, options)


@router.post("/guardrail")
async def guardrail(
    body: GuardrailRequest,
    client: InferenceClient = Depends(get_inference_client),
    options: GenerationOptions = Depends(get_generation_options),
):
    """Classify whether a request is allowed. Returns {"allowed", "reason", "redirectMessage"}."""
    return await run_task(Task.GUARDRAIL, body.to_payload(), client, options)
