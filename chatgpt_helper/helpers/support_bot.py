from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from chatgpt_helper.llm import ChatGPTClient, ChatGPTError
from chatgpt_helper.llm.base import USER
from chatgpt_helper.llm.response import response_text, total_tokens
from chatgpt_helper.schema import TicketReply

logger = logging.getLogger(__name__)

ESCALATION_KEYWORDS = ("escalate", "supervisor", "manager", "complex", "technical team", "specialist")

FALLBACK_RESPONSE = "I'm experiencing technical difficulties. Please contact support directly or try again later."

GUIDELINES = (
    "Guidelines:\n"
    "1. Be friendly, professional, and empathetic\n"
    "2. Use the knowledge base to answer questions accurately\n"
    "3. If you don't know something, admit it and offer to escalate\n"
    "4. Always try to solve the customer's problem\n"
    "5. Keep responses concise but helpful\n"
    "6. Ask clarifying questions when needed"
)


def build_support_prompt(knowledge_base: Mapping[str, Any]) -> str:
    company = knowledge_base.get("company", "our company")
    knowledge = json.dumps(knowledge_base, indent=4, ensure_ascii=False)
    return (
        f"You are a helpful customer support assistant for {company}.\n\n"
        f"Your knowledge base:\n{knowledge}\n\n"
        f"{GUIDELINES}"
    )


class SupportBot:
    """
    Customer support assistant on the conversational path.

    The knowledge base is embedded in the system prompt; reset() clears the
    history and re-applies it.
    """

    def __init__(
        self,
        client: ChatGPTClient,
        knowledge_base: Mapping[str, Any],
        *,
        fallback_response: str = FALLBACK_RESPONSE,
    ) -> None:
        self.client = client
        self.knowledge_base = knowledge_base
        self.fallback_response = fallback_response
        self._apply_system_prompt()

    def _apply_system_prompt(self) -> None:
        self.client.set_system_prompt(build_support_prompt(self.knowledge_base)).set_temperature(0.3).set_max_tokens(300)

    def handle_ticket(self, message: str, customer_info: Mapping[str, Any] | None = None) -> TicketReply:
        text = message
        if customer_info:
            text = f"Customer Info: {json.dumps(dict(customer_info), ensure_ascii=False)}\n\nCustomer Message: {message}"

        try:
            data = self.client.conversation(text)
        except ChatGPTError as e:
            logger.warning("ticket handling failed: %s", e)
            return TicketReply(success=False, error=str(e), fallback_response=self.fallback_response)

        return TicketReply(
            success=True,
            response=response_text(data),
            tokens_used=total_tokens(data),
            needs_escalation=needs_escalation(data),
        )

    def conversation_summary(self) -> str:
        if not self.client.log.messages_by_role(USER):
            return "No conversation yet."

        transcript = json.dumps(self.client.log.as_payload(), indent=4, ensure_ascii=False)
        prompt = (
            "Summarize this customer support conversation in 2-3 sentences, "
            f"focusing on the main issue and resolution status:\n\n{transcript}"
        )
        try:
            return response_text(self.client.chat(prompt))
        except ChatGPTError as e:
            logger.warning("summary failed: %s", e)
            return "Unable to generate conversation summary."

    def reset(self) -> None:
        self.client.clear_conversation()
        self._apply_system_prompt()


def needs_escalation(response: Any) -> bool:
    text = response_text(response).lower()
    return any(k in text for k in ESCALATION_KEYWORDS)
