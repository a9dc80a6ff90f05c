from .content_generator import DEFAULT_TEMPLATES, ContentGenerator, ContentTemplate
from .support_bot import SupportBot

__all__ = ["DEFAULT_TEMPLATES", "ContentGenerator", "ContentTemplate", "SupportBot"]
