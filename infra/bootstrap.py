"""
Process-wide backend wiring.

Builds the inference client, generation defaults and OTP service once from
InfraConfig and hands the same instances to every request.
"""

from typing import Optional

from inference import GenerationOptions, InferenceClient
from services.otp import OTPService

from .config import InfraConfig, get_config


class InfraBootstrap:
    """
    Holder for the configured backends (one per process).

    Construction fails with ValueError on an unknown LLM_PROVIDER, so a bad
    deployment is reported at startup rather than on the first request.
    """

    _instance: Optional["InfraBootstrap"] = None

    def __init__(self, config: Optional[InfraConfig] = None):
        self.config = config or get_config()
        self.inference_client = self.config.create_inference_client()
        self.generation_options = self.config.generation_options()
        self.otp_service = self.config.create_otp_service()

    @classmethod
    def get_instance(cls, config: Optional[InfraConfig] = None) -> "InfraBootstrap":
        """Return the shared instance, building it on first use (config is ignored afterwards)."""
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset(cls):
        """Forget the shared instance; tests call this between cases."""
        cls._instance = None

    def get_inference_client(self) -> InferenceClient:
        return self.inference_client

    def get_generation_options(self) -> GenerationOptions:
        return self.generation_options

    def get_otp_service(self) -> OTPService:
        return self.otp_service

    def __repr__(self) -> str:
        return (
            f"InfraBootstrap(llm={self.config.llm_provider}, "
            f"model={self.config.llm_model}, "
            f"otp_store={self.config.otp_store}, "
            f"email={self.config.email_backend})"
        )


def bootstrap_infrastructure(config: Optional[InfraConfig] = None) -> InfraBootstrap:
    """Build (or fetch) the backends; called from the app lifespan."""
    return InfraBootstrap.get_instance(config)
