"""
Chat Responder Strategies

The chatbot answers either from the local rule selector or from a remote
Gemini text-completion call. The strategy is picked once, when the app is
built, from configuration:

  - GEMINI_API_KEY unset (or the placeholder) -> LocalChatResponder
  - GEMINI_API_KEY set                          -> GeminiChatResponder

A remote failure is surfaced as UpstreamUnavailableError. There is no retry
and no fallback to the local selector at request time.
"""

import json
from abc import ABC, abstractmethod

import httpx
import structlog

from chatbot.responder import respond
from core.config import Settings
from core.errors import UpstreamUnavailableError
from reports.aggregation import ChatContext

logger = structlog.get_logger()


class ChatResponder(ABC):
    """Produces the chatbot's reply to one message."""

    name: str = "base"

    @abstractmethod
    async def reply(self, message: str, context: ChatContext) -> str: ...


class LocalChatResponder(ChatResponder):
    name = "local"

    async def reply(self, message: str, context: ChatContext) -> str:
        return respond(message, context)


def build_prompt(message: str, context: ChatContext) -> str:
    """Render the owner's data snapshot and question into a single prompt."""
    low_stock = [
        {"name": e.item_name, "current": e.current_stock, "reorderQty": e.reorder_quantity}
        for e in context.low_stock_items
    ]
    orders = [{"id": o.order_id, "item": o.item_name, "planned": o.planned_amount} for o in context.recent_orders]
    usages = [
        {"orderId": u.order_id, "actual": u.actual_amount, "variance": u.variance, "status": u.status}
        for u in context.recent_usages
    ]
    return (
        "You are a helpful AI assistant for a Production Cost & Inventory Management System. "
        "You answer both business data questions and general questions.\n\n"
        "Business Data:\n"
        f"- Total Orders: {context.total_orders}\n"
        f"- Profit Orders: {context.profit_orders}, Loss Orders: {context.loss_orders}\n"
        f"- Low Stock Items: {len(context.low_stock_items)}\n"
        f"- Unread Alerts: {context.unread_alerts}\n"
        f"- Currency: {context.currency}\n"
        f"- Low Stock: {json.dumps(low_stock)}\n"
        f"- Recent Orders: {json.dumps(orders)}\n"
        f"- Actual Usage: {json.dumps(usages)}\n\n"
        f"User Message: {message}\n\n"
        "Answer helpfully. Use the business data when relevant. Be friendly and concise."
    )


class GeminiChatResponder(ChatResponder):
    """Single-attempt call to the Gemini generateContent endpoint."""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def complete(self, prompt: str) -> str:
        body = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.endpoint, params={"key": self.api_key}, json=body)
                response.raise_for_status()
                payload = response.json()
            return payload["candidates"][0]["content"]["parts"][0]["text"]
        except httpx.HTTPError as exc:
            logger.error("chatbot.upstream_failed", model=self.model, error=str(exc))
            raise UpstreamUnavailableError(details=str(exc)) from exc
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            logger.error("chatbot.upstream_malformed", model=self.model, error=repr(exc))
            raise UpstreamUnavailableError(details=f"Malformed completion response: {exc!r}") from exc

    async def reply(self, message: str, context: ChatContext) -> str:
        return await self.complete(build_prompt(message, context))


def build_chat_responder(settings: Settings) -> ChatResponder:
    if settings.chatbot_remote_enabled:
        responder: ChatResponder = GeminiChatResponder(
            api_key=settings.gemini_api_key.strip(),
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.chatbot_timeout_seconds,
        )
    else:
        responder = LocalChatResponder()
    logger.info("chatbot.strategy_selected", strategy=responder.name)
    return responder
