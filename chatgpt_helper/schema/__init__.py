from .results import ContentSeries, GeneratedContent, SeoReport, TicketReply

__all__ = ["ContentSeries", "GeneratedContent", "SeoReport", "TicketReply"]
