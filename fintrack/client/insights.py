"""
Spending insight prompt and answer extraction.

The prompt lists the most recent transactions one per line, e.g.

    2024-05-02: Market - R$85.5 (expense, nubank)
"""

from typing import Any, Iterable, Optional

from fintrack.models.transaction import Transaction


SYSTEM_PROMPT = (
    "You are a personal finance advisor. Analyze the user's transactions "
    "and give 3 short, practical insights about their spending. "
    "Be friendly and use emojis."
)

FALLBACK_INSIGHT = "Couldn't generate insights right now. Check the API key on the server."


def format_amount(amount: float) -> str:
    """Shortest exact form: 1234567 not 1.23457e+06, 85.5 not 85.50."""
    if amount.is_integer():
        return str(int(amount))
    return repr(amount)


def format_transaction_line(transaction: Transaction, currency_symbol: str = "R$") -> str:
    return (
        f"{transaction.date}: {transaction.description} - "
        f"{currency_symbol}{format_amount(transaction.amount)} "
        f"({transaction.type.value}, {transaction.card.value})"
    )


def build_insight_messages(
    transactions: Iterable[Transaction],
    limit: int = 50,
    currency_symbol: str = "R$",
) -> list[dict[str, str]]:
    """Chat messages asking for insights over the first `limit` transactions."""
    lines = [
        format_transaction_line(t, currency_symbol)
        for _, t in zip(range(limit), transactions)
    ]
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": "My transactions:\n" + "\n".join(lines)},
    ]


def extract_insight(response: Any) -> Optional[str]:
    """First choice's message content, or None if the answer has none."""
    if not isinstance(response, dict):
        return None
    choices = response.get("choices")
    if not choices or not isinstance(choices, list):
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    content = (first.get("message") or {}).get("content")
    return content or None
