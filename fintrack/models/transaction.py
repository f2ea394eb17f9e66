"""
Core Data Models for Fintrack

These models describe the two spreadsheet tables and the transaction
shapes that travel between client and backend.

DESIGN DECISION: The backend stores what it is given. Inbound payloads are
only coerced (amount to float, missing cells to ""), never validated against
the enums below. The enums exist for the client form and for reading rows
back with sane defaults.

IDENTITY: A transaction has no synthetic ID. Its identity is its 1-based
row position in the Transactions table. Row 1 is the header.
"""

import math
import re
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# TABLE LAYOUT
# =============================================================================

FIRST_DATA_ROW = 2

USER_COLUMNS = ["Username", "Password", "CreatedAt"]

TRANSACTION_COLUMNS = [
    "Username",
    "Date",
    "Description",
    "Amount",
    "Type",
    "Method",
    "Card",
    "Category",
]


# =============================================================================
# ENUMS - Values offered by the client form
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money."""
    INCOME = "income"
    EXPENSE = "expense"


class PaymentMethod(str, Enum):
    """How a transaction was paid."""
    CREDIT = "credit"
    DEBIT = "debit"


class CardIssuer(str, Enum):
    """
    Fixed set of card/account issuers.

    Anything unknown is displayed as OTHER.
    """
    NUBANK = "nubank"
    ITAU = "itau"
    SANTANDER = "santander"
    MERCADOPAGO = "mercadopago"
    INTER = "inter"
    CASH = "cash"
    OTHER = "other"


# Free-form on the backend; these are only suggestions in the form.
CATEGORY_SUGGESTIONS = [
    "Food",
    "Transport",
    "Leisure",
    "Health",
    "Education",
    "Bills",
    "Others",
]

DEFAULT_CATEGORY = "General"


_FLOAT_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_amount(value: Any) -> float:
    """
    Parse an amount the lenient way a spreadsheet front end does.

    Leading whitespace is ignored and the longest numeric prefix wins
    ("12.5abc" -> 12.5). Anything unparseable, NaN, infinite or too large
    for a float becomes 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
    else:
        match = _FLOAT_PREFIX.match(str(value).strip())
        if not match:
            return 0.0
        number = float(match.group())
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def _cell(value: Any) -> Any:
    """Render a payload value as a spreadsheet cell."""
    if value is None:
        return ""
    return value


# =============================================================================
# USERS TABLE
# =============================================================================

class UserRecord(BaseModel):
    """
    A registered user.

    SECURITY NOTE: The password is stored and compared as plaintext.
    """
    username: str
    password: str
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the account was registered"
    )

    def to_row(self) -> list:
        """Convert to a Users row in header order."""
        return [self.username, self.password, self.created_at.isoformat()]


# =============================================================================
# TRANSACTIONS TABLE
# =============================================================================

class TransactionPayload(BaseModel):
    """
    Inbound add/update payload as the backend receives it.

    Fields are deliberately loose: whatever the caller sends is written.
    `rowIndex` is only meaningful for update/delete.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    username: Any = None
    date: Any = None
    description: Any = None
    amount: float = 0.0
    type: Any = None
    method: Any = None
    card: Any = None
    category: Any = None
    row_index: Any = Field(default=None, alias="rowIndex")

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> float:
        return parse_amount(v)

    def to_row(self) -> list:
        """Convert to a Transactions row in fixed column order."""
        return [
            _cell(self.username),
            _cell(self.date),
            _cell(self.description),
            self.amount,
            _cell(self.type),
            _cell(self.method),
            _cell(self.card),
            _cell(self.category),
        ]


class Transaction(BaseModel):
    """
    A transaction as the client holds it.

    `id` is the row position reported by the backend (`_rowIndex`).
    None means "not saved yet".
    """

    id: Optional[int] = None
    date: str = ""
    description: str = ""
    amount: float = 0.0
    type: TransactionType = TransactionType.EXPENSE
    method: PaymentMethod = PaymentMethod.CREDIT
    card: CardIssuer = CardIssuer.OTHER
    category: str = DEFAULT_CATEGORY

    @classmethod
    def from_record(cls, record: dict) -> "Transaction":
        """
        Build a client transaction from a getData record.

        Missing or unknown values fall back to the form defaults
        instead of failing the whole load.
        """
        def pick(enum_cls, value, default):
            try:
                return enum_cls(str(value).strip().lower())
            except ValueError:
                return default

        row_index = record.get("_rowIndex")
        try:
            row_index = int(row_index) if row_index is not None else None
        except (TypeError, ValueError):
            row_index = None

        return cls(
            id=row_index,
            date=_text(record.get("Date")),
            description=_text(record.get("Description")),
            amount=parse_amount(record.get("Amount")),
            type=pick(TransactionType, record.get("Type"), TransactionType.EXPENSE),
            method=pick(PaymentMethod, record.get("Method"), PaymentMethod.CREDIT),
            card=pick(CardIssuer, record.get("Card"), CardIssuer.OTHER),
            category=_text(record.get("Category")) or DEFAULT_CATEGORY,
        )

    @property
    def sort_date(self):
        """Parsed date for ordering; unparseable dates sort last."""
        try:
            return date.fromisoformat(self.date[:10])
        except ValueError:
            return date.min

    @property
    def signed_amount(self) -> float:
        return self.amount if self.type == TransactionType.INCOME else -self.amount

    def to_payload(self, username: str) -> dict:
        """Fields sent to the backend for add/update."""
        return {
            "username": username,
            "rowIndex": self.id,
            "date": self.date,
            "description": self.description,
            "amount": self.amount,
            "type": self.type.value,
            "method": self.method.value,
            "card": self.card.value,
            "category": self.category,
        }


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()[:10]
    return str(value)
