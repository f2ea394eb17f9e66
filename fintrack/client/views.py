"""
Display helpers shared by the UI: card labels and colors, totals, money
formatting. Nothing in here talks to the backend.
"""

from typing import Iterable, NamedTuple

from fintrack.models.transaction import CardIssuer, Transaction, TransactionType


class CardOption(NamedTuple):
    label: str
    color: str


CARD_OPTIONS: dict[CardIssuer, CardOption] = {
    CardIssuer.NUBANK: CardOption("NuBank", "#9333EA"),
    CardIssuer.ITAU: CardOption("Itaú", "#F97316"),
    CardIssuer.SANTANDER: CardOption("Santander", "#DC2626"),
    CardIssuer.MERCADOPAGO: CardOption("Mercado Pago", "#06B6D4"),
    CardIssuer.INTER: CardOption("Inter", "#FB923C"),
    CardIssuer.CASH: CardOption("Cash", "#10B981"),
    CardIssuer.OTHER: CardOption("Other", "#64748B"),
}


def card_option(card: CardIssuer) -> CardOption:
    return CARD_OPTIONS.get(card, CARD_OPTIONS[CardIssuer.OTHER])


class Totals(NamedTuple):
    income: float
    expense: float

    @property
    def balance(self) -> float:
        return self.income - self.expense


def compute_totals(transactions: Iterable[Transaction]) -> Totals:
    income = 0.0
    expense = 0.0
    for t in transactions:
        if t.type == TransactionType.INCOME:
            income += t.amount
        else:
            expense += t.amount
    return Totals(income=income, expense=expense)


def format_money(amount: float, currency_symbol: str = "R$") -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}{currency_symbol} {abs(amount):,.2f}"


def format_signed(transaction: Transaction, currency_symbol: str = "R$") -> str:
    """'+ R$ 10.00' for income, '- R$ 10.00' for expenses."""
    prefix = "+" if transaction.type == TransactionType.INCOME else "-"
    return f"{prefix} {format_money(transaction.amount, currency_symbol)}"


def form_amount(transaction: Transaction) -> float:
    """Starting value for the amount input, which does not accept negatives."""
    return max(transaction.amount, 0.0)
