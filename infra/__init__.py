"""
Infrastructure module exports.

Configuration and bootstrap for all service backends.
"""

from .config import InfraConfig, get_config, LLMProviderType, OTPStoreType, EmailBackendType
from .bootstrap import InfraBootstrap, bootstrap_infrastructure

__all__ = [
    "InfraConfig",
    "get_config",
    "LLMProviderType",
    "OTPStoreType",
    "EmailBackendType",
    "InfraBootstrap",
    "bootstrap_infrastructure",
]
