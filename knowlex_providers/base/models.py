"""
Provider-agnostic domain models public surface.

Re-exports the one-class-per-file implementations under
``knowlex_providers.base.models_parts``.
"""

from .models_parts.capabilities import ModelCapabilities
from .models_parts.chat_response import Response
from .models_parts.content_part import ContentPart, ContentPartType
from .models_parts.message import VALID_ROLES, Message, Role
from .models_parts.model_info import ModelInfo
from .models_parts.stream_chunk import StreamChunk
from .models_parts.token_usage import TokenUsage
from .models_parts.tool_call import ToolCall, encode_tool_arguments, parse_tool_arguments

__all__ = [
    "ContentPart",
    "ContentPartType",
    "Message",
    "Role",
    "VALID_ROLES",
    "Response",
    "StreamChunk",
    "ToolCall",
    "TokenUsage",
    "ModelCapabilities",
    "ModelInfo",
    "encode_tool_arguments",
    "parse_tool_arguments",
]
