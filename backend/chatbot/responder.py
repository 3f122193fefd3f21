"""
Chatbot Response Selector

Maps a free-text message to a canned, data-driven answer. Intents are an
ordered list of (predicate, responder) rules; the first predicate that
matches the lower-cased message wins, and the final rule always matches.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from reports.aggregation import ChatContext

GREETING_PATTERN = re.compile(r"^(hi|hello|hey|good morning|good afternoon|good evening|howdy)\b")
GRATITUDE_PATTERN = re.compile(r"\b(thank you|thanks|thank|thx)\b")


@dataclass(frozen=True)
class IntentRule:
    name: str
    matches: Callable[[str], bool]
    respond: Callable[[str, ChatContext], str]


def _contains_any(*needles: str) -> Callable[[str], bool]:
    return lambda msg: any(needle in msg for needle in needles)


def _money(context: ChatContext, amount: float) -> str:
    return f"{context.currency}{amount:,.2f}"


# ─── Responders ─────────────────────────────────────────────────────────────


def _greeting(msg: str, context: ChatContext) -> str:
    return (
        "Hello! I'm your assistant for production management. "
        f"You have {context.total_orders} order(s) on record and "
        f"{context.unread_alerts} unread alert(s). "
        "Ask me about orders, inventory, profit/loss or anything else."
    )


def _small_talk(msg: str, context: ChatContext) -> str:
    return (
        "I'm doing great, thanks for asking! "
        f"You currently have {context.total_orders} order(s) and "
        f"{len(context.low_stock_items)} item(s) needing attention. What can I help you with?"
    )


def _gratitude(msg: str, context: ChatContext) -> str:
    pending = f" {len(context.low_stock_items)} item(s) still need reordering." if context.low_stock_items else ""
    return f"You're welcome!{pending} Feel free to ask anything else."


def _reorder(msg: str, context: ChatContext) -> str:
    if not context.low_stock_items:
        return "Great news! All inventory items are well-stocked. No reorders needed right now."
    lines = "\n".join(
        f"  • {entry.item_name} (need {entry.reorder_quantity:.2f} units)"
        for entry in context.low_stock_items
    )
    return f"{len(context.low_stock_items)} item(s) need reordering:\n{lines}"


def _profit_loss(msg: str, context: ChatContext) -> str:
    if context.total_orders == 0:
        return "No orders recorded yet. Add orders and actual usage data to see profit/loss analysis."
    if context.profit_orders > context.loss_orders:
        overall = "profit"
    elif context.loss_orders > context.profit_orders:
        overall = "loss"
    else:
        overall = "balanced"
    net = -sum(usage.variance for usage in context.recent_usages)
    return (
        "Financial Summary:\n"
        f"• Overall: {overall}\n"
        f"• Profitable orders: {context.profit_orders}\n"
        f"• Loss orders: {context.loss_orders}\n"
        f"• Net across recent usage: {_money(context, net)}\n"
        f"• Total tracked: {context.total_orders}"
    )


def _variance(msg: str, context: ChatContext) -> str:
    if not context.recent_usages:
        return "No variance data yet. Record actual usage for your orders first."
    highest = max(context.recent_usages, key=lambda usage: abs(usage.variance))
    return (
        "Highest variance:\n"
        f"• Order: {highest.order_id}\n"
        f"• Variance: {_money(context, highest.variance)}\n"
        f"• Status: {highest.status}"
    )


def _alerts(msg: str, context: ChatContext) -> str:
    return (
        f"You have {context.unread_alerts} unread alert(s). "
        "Go to the Alerts section to review and mark them as read."
    )


def _orders(msg: str, context: ChatContext) -> str:
    return (
        "Orders:\n"
        f"• Total: {context.total_orders}\n"
        f"• Profitable: {context.profit_orders}\n"
        f"• Loss: {context.loss_orders}\n"
        f"• Pending: {context.pending_orders}"
    )


def _inventory(msg: str, context: ChatContext) -> str:
    return (
        f"Inventory: {len(context.low_stock_items)} item(s) need reordering. "
        "Check the Inventory section for full details."
    )


def _help(msg: str, context: ChatContext) -> str:
    return (
        "I can help you with:\n"
        f"• Profit/loss status across your {context.total_orders} order(s)\n"
        "• Items needing reorder\n"
        "• Variance analysis\n"
        f"• Alert summary ({context.unread_alerts} unread)\n"
        "Just ask!"
    )


def _salutation(msg: str, context: ChatContext) -> str:
    part_of_day = "night" if "night" in msg else "evening" if "evening" in msg else "morning"
    return (
        f"Good {part_of_day}! Hope your day is going well. "
        "How can I assist you with your production management today?"
    )


def _fallback(msg: str, context: ChatContext) -> str:
    return (
        "Here's a quick overview of your system:\n"
        f"• {context.total_orders} total orders ({context.profit_orders} profit, {context.loss_orders} loss)\n"
        f"• {len(context.low_stock_items)} items need reordering\n"
        f"• {context.unread_alerts} unread alerts\n"
        "Feel free to ask about your data."
    )


INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule("greeting", lambda msg: bool(GREETING_PATTERN.search(msg)), _greeting),
    IntentRule("small_talk", _contains_any("how are you", "how do you do"), _small_talk),
    IntentRule("gratitude", lambda msg: bool(GRATITUDE_PATTERN.search(msg)), _gratitude),
    IntentRule("reorder", _contains_any("reorder", "low stock", "out of stock"), _reorder),
    IntentRule("profit_loss", _contains_any("profit", "loss", "revenue", "financial", "earning"), _profit_loss),
    IntentRule("variance", _contains_any("variance", "biggest difference"), _variance),
    IntentRule("alerts", _contains_any("alert", "notification", "warning"), _alerts),
    IntentRule("orders", _contains_any("order", "production"), _orders),
    IntentRule("inventory", _contains_any("inventory", "stock", "item"), _inventory),
    IntentRule("help", _contains_any("help", "what can you"), _help),
    IntentRule("salutation", _contains_any("good morning", "good night", "good evening"), _salutation),
    IntentRule("fallback", lambda msg: True, _fallback),
)


def match_intent(message: str) -> IntentRule:
    msg = message.lower().strip()
    return next(rule for rule in INTENT_RULES if rule.matches(msg))


def respond(message: str, context: ChatContext) -> str:
    """Answer a chat message from the owner's data snapshot."""
    msg = message.lower().strip()
    return match_intent(msg).respond(msg, context)
