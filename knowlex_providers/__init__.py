"""knowlex_providers package

Unified abstraction over LLM providers with OpenAI-style and Claude-style
HTTP APIs.

Public API (re-exported):
    - Version: ``__version__``
    - Configuration: :class:`ModelConfig`, :func:`load_config`,
      :func:`config_from_env`
    - Resolution and caching: :class:`ModelManager`, :class:`ProviderRegistry`,
      :class:`ModelInstanceCache`, :func:`resolve_and_get_model`
    - Domain types: :class:`Message`, :class:`ContentPart`,
      :class:`Response`, :class:`StreamChunk`, :class:`ToolCall`,
      :class:`TokenUsage`, :class:`ModelCapabilities`
    - Streaming: :class:`StreamSession`, :class:`StreamCallbacks`,
      :func:`consume_stream`, :class:`CancellationToken`
    - Exceptions: :class:`ProviderError` and subclasses, :class:`ErrorCode`

Example::

    from knowlex_providers import ModelConfig, resolve_and_get_model, user_message

    model = resolve_and_get_model(ModelConfig(model="gpt-4o", api_key="sk-..."))
    reply = model.chat([user_message("Hello")])
"""

from .anthropic import ClaudeModel, ClaudeProvider
from .base.cancellation import CancellationToken
from .base.dto import ModelConfig, load_config
from .base.errors import (
    APIError,
    ConfigurationError,
    ErrorCode,
    ProviderError,
    ValidationError,
)
from .base.interfaces import AIModel, AIProvider
from .base.models import (
    ContentPart,
    Message,
    ModelCapabilities,
    ModelInfo,
    Response,
    StreamChunk,
    TokenUsage,
    ToolCall,
)
from .base.registry import ModelInstanceCache, ModelManager, ProviderRegistry
from .base.resilience import RetryConfig
from .base.streaming import (
    StreamCallbacks,
    StreamResult,
    StreamSession,
    StreamState,
    consume_stream,
)
from .base.utils.messages import (
    assistant_message,
    system_message,
    user_message,
    validate_messages,
)
from .bootstrap import (
    create_manager,
    get_default_manager,
    resolve_and_get_model,
    start_cache_cleanup,
    stop_cache_cleanup,
)
from .config import config_from_env, get_provider_config
from .openai import OpenAIModel, OpenAIProvider

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AIModel",
    "AIProvider",
    "APIError",
    "CancellationToken",
    "ClaudeModel",
    "ClaudeProvider",
    "ConfigurationError",
    "ContentPart",
    "ErrorCode",
    "Message",
    "ModelCapabilities",
    "ModelConfig",
    "ModelInfo",
    "ModelInstanceCache",
    "ModelManager",
    "OpenAIModel",
    "OpenAIProvider",
    "ProviderError",
    "ProviderRegistry",
    "Response",
    "RetryConfig",
    "StreamCallbacks",
    "StreamChunk",
    "StreamResult",
    "StreamSession",
    "StreamState",
    "TokenUsage",
    "ToolCall",
    "ValidationError",
    "assistant_message",
    "config_from_env",
    "consume_stream",
    "create_manager",
    "get_default_manager",
    "get_provider_config",
    "load_config",
    "resolve_and_get_model",
    "start_cache_cleanup",
    "stop_cache_cleanup",
    "system_message",
    "user_message",
    "validate_messages",
]
