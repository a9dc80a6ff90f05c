from chatgpt_helper.llm import (
    ApiError,
    ChatGPTClient,
    ChatGPTError,
    ChatMessage,
    ConversationLog,
    GenerationConfig,
    TransportError,
    build_client,
)

__version__ = "0.1.0"

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
