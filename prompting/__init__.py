from .tasks import (
    Task,
    TaskOutput,
    RewriteOutput,
    DraftOutput,
    SimilarityOutput,
    GuardrailOutput,
    TASK_LABELS,
    output_shape,
    shape_fields,
)
from .assembler import build_messages, build_inference_request, output_instruction

__all__ = [
    "Task",
    "TaskOutput",
    "RewriteOutput",
    "DraftOutput",
    "SimilarityOutput",
    "GuardrailOutput",
    "TASK_LABELS",
    "output_shape",
    "shape_fields",
    "build_messages",
    "build_inference_request",
    "output_instruction",
]
