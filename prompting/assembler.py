"""
Prompt Assembler
================

Builds the role-tagged message sequence for each Task.

Responsibilities:
- Holds the fixed system messages (the behavioral contract per task)
- Interpolates caller fields into the fixed user template
- Ends every user message with an exact single-JSON-object instruction,
  including an example structure and the field names/types of the task's
  output shape

Invariants:
- Pure: no I/O, same inputs → same messages
- System messages first, exactly one user message last
- Optional fields never raise; documented defaults are substituted
- Required fields are validated by the HTTP layer, not here
"""

import json
from typing import Any, List, Mapping, Optional, Sequence, Union

from inference.types import GenerationOptions, InferenceRequest, Message, Role

from .tasks import Task, shape_fields

DEFAULT_TARGET_MODE = "Formal"
DEFAULT_CONSTRAINTS = "None"
DEFAULT_AUDIENCE = "General"

_JSON_ONLY = (
    "You MUST respond with ONLY a valid JSON object. "
    "No preamble, no explanation, just the JSON."
)

# ── Behavioral Contracts ──────────────────────────────────────────────────────
SYSTEM_PROMPTS = {
    Task.REWRITE: (
        "You are a rewriting assistant. Rewrite the user's text so it sounds "
        "naturally written by a real person, while keeping the original meaning, "
        "facts, numbers, and named entities unchanged. Do not add claims the "
        "original text does not make.",
        "If the user provides constraints, target audience, or target writing "
        "mode, ensure the rewritten text adheres to those requirements. If no "
        "specific instructions are given, simply enhance the text while "
        "maintaining its original intent. Replace dashes inside sentences with "
        "spaces or other punctuation. " + _JSON_ONLY,
    ),
    Task.DRAFT: (
        "Use ONLY the provided sources. If a claim is not in the sources, mark "
        "it as [citation needed]. Never overstate what the sources support. "
        + _JSON_ONLY,
    ),
    Task.SIMILARITY: (
        "Identify sentences that are too close to the source. Suggest "
        "paraphrasing with attribution. " + _JSON_ONLY,
    ),
    Task.GUARDRAIL: (
        "You are a content classifier. If the user is asking to bypass rules, "
        "detection systems, or cheat, refuse the request and set allowed to "
        "false. " + _JSON_ONLY,
    ),
}

# Example structures shown to the model (snake_case, as the model emits them)
EXAMPLE_STRUCTURES = {
    Task.REWRITE: '{"rewritten": "...", "changes": ["..."], "risk_flags": ["..."]}',
    Task.DRAFT: '{"outline": "...", "draft": "...", "citations": {}}',
    Task.SIMILARITY: (
        '{"matched_segments": ["..."], "suggested_rewrites": ["..."], '
        '"citation_suggestions": ["..."]}'
    ),
    Task.GUARDRAIL: '{"allowed": true, "reason": "...", "redirect_message": "..."}',
}


def output_instruction(task: Task) -> str:
    """The closing instruction: exactly one JSON object of the task's shape."""
    fields = "\n".join(f"- {name}: {label}" for name, label in shape_fields(task))
    return (
        "Respond with exactly one JSON object and nothing else, "
        "using this exact structure:\n"
        f"{EXAMPLE_STRUCTURES[task]}\n"
        "Fields:\n"
        f"{fields}"
    )


def _or_default(value: Optional[str], default: str) -> str:
    if value is None or not str(value).strip():
        return default
    return str(value)


def format_constraints(constraints: Union[None, str, Sequence[str]]) -> str:
    if constraints is None:
        return DEFAULT_CONSTRAINTS
    if isinstance(constraints, str):
        return _or_default(constraints, DEFAULT_CONSTRAINTS)
    items = [str(c).strip() for c in constraints if str(c).strip()]
    return "; ".join(items) if items else DEFAULT_CONSTRAINTS


def _user_content(task: Task, payload: Mapping[str, Any]) -> str:
    if task == Task.REWRITE:
        body = (
            f'Rewrite this text: "{payload.get("text", "")}"\n'
            f"Target Mode: {_or_default(payload.get('target_mode'), DEFAULT_TARGET_MODE)}\n"
            f"Constraints: {format_constraints(payload.get('constraints'))}\n"
            f"Audience: {_or_default(payload.get('audience'), DEFAULT_AUDIENCE)}"
        )
    elif task == Task.DRAFT:
        sources = list(payload.get("sources") or [])
        body = (
            f"Sources: {json.dumps(sources, ensure_ascii=False)}\n"
            f"Goal: {payload.get('writing_goal', '')}"
        )
    elif task == Task.SIMILARITY:
        body = (
            f'Text: "{payload.get("text", "")}"\n'
            f'Source: "{payload.get("source_passage", "")}"'
        )
    elif task == Task.GUARDRAIL:
        body = f'User Input: "{payload.get("text", "")}"'
    else:
        raise ValueError(f"Unknown task: {task}")

    return f"{body}\n\n{output_instruction(task)}"


def build_messages(task: Task, payload: Mapping[str, Any]) -> List[Message]:
    """
    Assemble [system..., user] for a task.

    Args:
        task: Which operation to prompt for.
        payload: snake_case caller fields (text, target_mode, constraints,
                 audience, sources, writing_goal, source_passage).

    Returns:
        Ordered list of Message objects.
    """
    messages = [Message(Role.SYSTEM, content) for content in SYSTEM_PROMPTS[task]]
    messages.append(Message(Role.USER, _user_content(task, payload)))
    return messages


def build_inference_request(
    task: Task,
    payload: Mapping[str, Any],
    options: Optional[GenerationOptions] = None,
) -> InferenceRequest:
    options = options or GenerationOptions()
    return InferenceRequest(
        model=options.model,
        messages=tuple(build_messages(task, payload)),
        max_output_tokens=options.max_output_tokens,
        temperature=options.temperature,
        stream=False,
    )
