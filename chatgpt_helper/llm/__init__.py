from .base import ChatMessage, GenerationConfig
from .client import ChatGPTClient
from .conversation import ConversationLog
from .errors import ApiError, ChatGPTError, TransportError
from .factory import build_client

__all__ = [
    "ApiError",
    "ChatGPTClient",
    "ChatGPTError",
    "ChatMessage",
    "ConversationLog",
    "GenerationConfig",
    "TransportError",
    "build_client",
]
