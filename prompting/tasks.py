"""
Task catalogue: the four LLM-backed operations and their output shapes.

Output shapes are pydantic models with snake_case fields (the names the
model is told to emit) and camelCase aliases (the names the HTTP layer
returns). Either spelling is accepted on input; unknown keys are dropped.
"""

from enum import Enum
from typing import Any, Dict, List, Tuple, Type, get_args, get_origin

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Task(str, Enum):
    REWRITE = "rewrite"
    DRAFT = "draft"
    SIMILARITY = "similarity"
    GUARDRAIL = "guardrail"


class TaskOutput(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        strict=True,
    )

    def to_response(self) -> Dict[str, Any]:
        """camelCase dict for the HTTP response."""
        return self.model_dump(by_alias=True)


class RewriteOutput(TaskOutput):
    rewritten: str
    changes: List[str]
    risk_flags: List[str]


class DraftOutput(TaskOutput):
    outline: str
    draft: str
    citations: Dict[str, Any]


class SimilarityOutput(TaskOutput):
    matched_segments: List[str]
    suggested_rewrites: List[str]
    citation_suggestions: List[str]


class GuardrailOutput(TaskOutput):
    allowed: bool
    reason: str
    redirect_message: str


OUTPUT_SHAPES: Dict[Task, Type[TaskOutput]] = {
    Task.REWRITE: RewriteOutput,
    Task.DRAFT: DraftOutput,
    Task.SIMILARITY: SimilarityOutput,
    Task.GUARDRAIL: GuardrailOutput,
}

# Human-facing names used in error messages ("Rewrite failed")
TASK_LABELS: Dict[Task, str] = {
    Task.REWRITE: "Rewrite",
    Task.DRAFT: "Draft",
    Task.SIMILARITY: "Similarity check",
    Task.GUARDRAIL: "Guardrail check",
}


def output_shape(task: Task) -> Type[TaskOutput]:
    return OUTPUT_SHAPES[task]


def _type_label(annotation: Any) -> str:
    origin = get_origin(annotation)
    if origin in (list, List):
        (inner,) = get_args(annotation) or (Any,)
        return f"array of {_type_label(inner)}s"
    if origin in (dict, Dict) or annotation is dict:
        return "object"
    return {str: "string", bool: "boolean", int: "integer", float: "number"}.get(annotation, "value")


def shape_fields(task: Task) -> List[Tuple[str, str]]:
    """[(snake_case field name, JSON type label)] in declaration order."""
    return [
        (name, _type_label(field.annotation))
        for name, field in output_shape(task).model_fields.items()
    ]
