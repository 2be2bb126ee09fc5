"""
Infrastructure configuration system.

Environment-based backend selection with sensible defaults.
The LLM provider defaults to Groq's OpenAI-compatible endpoint; OTP
storage and email default to in-process backends.
"""

import os
from typing import Optional, Literal
from dataclasses import dataclass

from inference import (
    GeminiAdapter,
    GenerationOptions,
    HuggingFaceAdapter,
    InferenceClient,
    OpenAIStyleAdapter,
    ProviderAdapter,
    StubProviderAdapter,
)
from inference.openai_style import DEFAULT_BASE_URLS
from inference import gemini, huggingface
from services.mail import EmailSender, LoggingEmailSender, SMTPEmailSender
from services.otp import InMemoryOTPStore, OTPService, OTPStore, SQLiteOTPStore


LLMProviderType = Literal["groq", "mistral", "openai", "huggingface", "gemini", "stub"]
OTPStoreType = Literal["memory", "sqlite"]
EmailBackendType = Literal["log", "smtp"]

DEFAULT_MODEL = "llama-3.1-8b-instant"

# Credential variable per provider; LLM_API_KEY_ENV overrides
_API_KEY_ENVS = {
    "groq": "GROQ_API_KEY",
    "mistral": "MISTRAL_API_KEY",
    "openai": "OPENAI_API_KEY",
    "huggingface": "HF_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "stub": "STUB_API_KEY",
}


@dataclass
class InfraConfig:
    """Infrastructure configuration from environment."""

    # LLM
    llm_provider: LLMProviderType
    llm_base_url: Optional[str]
    llm_model: str
    llm_api_key_env: str
    llm_max_output_tokens: int
    llm_temperature: float
    llm_timeout_s: float
    llm_max_retries: int
    llm_retry_delay_s: float

    # OTP
    otp_store: OTPStoreType
    otp_db_path: str
    otp_ttl_s: float
    otp_max_attempts: int

    # Email
    email_backend: EmailBackendType
    smtp_host: str
    smtp_port: int
    smtp_user: Optional[str]
    smtp_password: Optional[str]
    from_email: Optional[str]

    @classmethod
    def from_env(cls) -> "InfraConfig":
        """Load configuration from environment variables."""
        provider = os.getenv("LLM_PROVIDER", "groq").strip().lower()
        return cls(
            # LLM Configuration
            llm_provider=provider,  # type: ignore
            llm_base_url=os.getenv("LLM_BASE_URL") or None,
            llm_model=os.getenv("LLM_MODEL", DEFAULT_MODEL),
            llm_api_key_env=os.getenv("LLM_API_KEY_ENV") or _API_KEY_ENVS.get(provider, "GROQ_API_KEY"),
            llm_max_output_tokens=int(os.getenv("LLM_MAX_OUTPUT_TOKENS", "1500")),
            llm_temperature=float(os.getenv("LLM_TEMPERATURE", "0.7")),
            llm_timeout_s=float(os.getenv("LLM_TIMEOUT_S", "30")),
            llm_max_retries=int(os.getenv("LLM_MAX_RETRIES", "1")),
            llm_retry_delay_s=float(os.getenv("LLM_RETRY_DELAY_S", "20")),

            # OTP Configuration
            otp_store=os.getenv("OTP_STORE", "memory"),  # type: ignore
            otp_db_path=os.getenv("OTP_DB_PATH", "./otp.db"),
            otp_ttl_s=float(os.getenv("OTP_TTL_S", "600")),
            otp_max_attempts=int(os.getenv("OTP_MAX_ATTEMPTS", "5")),

            # Email Configuration
            email_backend=os.getenv("EMAIL_BACKEND", "log"),  # type: ignore
            smtp_host=os.getenv("SMTP_HOST", ""),
            smtp_port=int(os.getenv("SMTP_PORT", "587")),
            smtp_user=os.getenv("SMTP_USER") or None,
            smtp_password=os.getenv("SMTP_PASSWORD") or None,
            from_email=os.getenv("FROM_EMAIL") or None,
        )

    def create_provider_adapter(self) -> ProviderAdapter:
        """Create the provider adapter based on configuration."""
        if self.llm_provider in DEFAULT_BASE_URLS:
            return OpenAIStyleAdapter(
                base_url=self.llm_base_url or DEFAULT_BASE_URLS[self.llm_provider],
                name=self.llm_provider,
            )
        elif self.llm_provider == "huggingface":
            return HuggingFaceAdapter(base_url=self.llm_base_url or huggingface.DEFAULT_BASE_URL)
        elif self.llm_provider == "gemini":
            return GeminiAdapter(base_url=self.llm_base_url or gemini.DEFAULT_BASE_URL)
        elif self.llm_provider == "stub":
            return StubProviderAdapter()
        else:
            raise ValueError(f"Unknown LLM_PROVIDER: {self.llm_provider}")

    def create_inference_client(self) -> InferenceClient:
        return InferenceClient(
            adapter=self.create_provider_adapter(),
            api_key_env=self.llm_api_key_env,
            max_retries=self.llm_max_retries,
            retry_delay_s=self.llm_retry_delay_s,
            timeout_s=self.llm_timeout_s,
        )

    def generation_options(self) -> GenerationOptions:
        return GenerationOptions(
            model=self.llm_model,
            max_output_tokens=self.llm_max_output_tokens,
            temperature=self.llm_temperature,
        )

    def create_otp_store(self) -> OTPStore:
        """Create OTP store based on configuration."""
        if self.otp_store == "sqlite":
            return SQLiteOTPStore(self.otp_db_path)
        return InMemoryOTPStore()

    def create_email_sender(self) -> EmailSender:
        """Create email sender based on configuration."""
        if self.email_backend == "smtp":
            return SMTPEmailSender(
                host=self.smtp_host,
                port=self.smtp_port,
                username=self.smtp_user,
                password=self.smtp_password,
                from_email=self.from_email,
            )
        return LoggingEmailSender()

    def create_otp_service(self) -> OTPService:
        return OTPService(
            store=self.create_otp_store(),
            sender=self.create_email_sender(),
            ttl_s=self.otp_ttl_s,
            max_attempts=self.otp_max_attempts,
        )


def get_config() -> InfraConfig:
    """Get infrastructure configuration."""
    return InfraConfig.from_env()
