"""
HTTP request schemas - PURE DATA MODELS

Bodies arrive camelCase (targetMode, writingGoal, sourcePassage, userId);
fields are snake_case so to_payload() feeds the prompt assembler directly.
Anything that fails here is rejected with 400 before a provider is called.
"""

from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from config import Config

MAX_TEXT_CHARS = Config.MAX_TEXT_CHARS


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


RequiredText = Annotated[
    str,
    Field(min_length=1, max_length=MAX_TEXT_CHARS),
    AfterValidator(_not_blank),
]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump()


# ============================================================================
# LLM TASKS
# ============================================================================

class RewriteRequest(CamelModel):
    text: RequiredText
    target_mode: Optional[str] = Field(None, max_length=100)
    constraints: Optional[Union[str, List[str]]] = None
    audience: Optional[str] = Field(None, max_length=200)


class DraftRequest(CamelModel):
    sources: List[RequiredText] = Field(..., min_length=1)
    writing_goal: RequiredText


class SimilarityRequest(CamelModel):
    text: RequiredText
    source_passage: RequiredText


class GuardrailRequest(CamelModel):
    text: RequiredText


# ============================================================================
# OTP
# ============================================================================

class SendOTPRequest(CamelModel):
    user_id: Union[int, str]
    email: str = Field(..., max_length=320, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class VerifyOTPRequest(CamelModel):
    user_id: Union[int, str]
    otp: str = Field(..., min_length=1, max_length=12)
