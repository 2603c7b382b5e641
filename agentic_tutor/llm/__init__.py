# LLM Components
from .base import LLMClient, LLMResponse
from .gateway import (
    LLMGateway,
    GatewayConfig,
    ModelProvider,
)

__all__ = [
    "LLMClient",
    "LLMResponse",
    # Gateway
    "LLMGateway",
    "GatewayConfig",
    "ModelProvider",
]
