from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional, Tuple

InferenceStatus = Literal["success", "error"]


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"


class ErrorKind(str, Enum):
    # Results carry CONFIGURATION or TERMINAL_PROVIDER; the other kinds tag log records
    CONFIGURATION = "configuration"
    TRANSIENT_PROVIDER = "transient_provider"
    TERMINAL_PROVIDER = "terminal_provider"
    PARSE_FAILURE = "parse_failure"
    VALIDATION = "validation"


@dataclass(frozen=True)
class Message:
    role: Role
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class GenerationOptions:
    model: str = "llama-3.1-8b-instant"
    max_output_tokens: int = 1500
    temperature: float = 0.7


@dataclass(frozen=True)
class InferenceRequest:
    model: str
    messages: Tuple[Message, ...]
    max_output_tokens: int = 1500
    temperature: float = 0.7
    stream: bool = False


@dataclass
class InferenceResult:
    status: InferenceStatus
    text: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    status_code: Optional[int] = None
    detail: Optional[str] = None       # provider body or failure class, truncated
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.status == "success"

    @classmethod
    def success(cls, text: str, attempts: int) -> "InferenceResult":
        return cls(status="success", text=text, attempts=attempts)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
        attempts: int = 0,
    ) -> "InferenceResult":
        return cls(
            status="error",
            error_kind=kind,
            status_code=status_code,
            detail=detail,
            attempts=attempts,
        )
