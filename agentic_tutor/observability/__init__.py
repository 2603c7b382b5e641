# Observability Components
from .langfuse_client import (
    LangfuseClient,
    LangfuseConfig,
    Span,
    get_langfuse_client,
)
from .tracer import (
    Tracer,
    TracerConfig,
    TraceContext,
    get_tracer,
)

__all__ = [
    # Langfuse Client
    "LangfuseClient",
    "LangfuseConfig",
    "Span",
    "get_langfuse_client",
    # Tracer
    "Tracer",
    "TracerConfig",
    "TraceContext",
    "get_tracer",
]
