"""Enumerations for domain models."""

from enum import Enum


class OrderSide(str, Enum):
    """Direction of an order."""

    BUY = "buy"
    SELL = "sell"


class OrderStatus(str, Enum):
    """Brokerage order states this system distinguishes."""

    NEW = "new"
    ACCEPTED = "accepted"
    PENDING = "pending"
    PARTIALLY_FILLED = "partially_filled"
    FILLED = "filled"
    CANCELED = "canceled"
    EXPIRED = "expired"
    REJECTED = "rejected"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str) -> "OrderStatus":
        """Map a raw brokerage status onto a known member (OTHER if unknown)."""
        normalized = (value or "").strip().lower()
        if normalized == "cancelled":
            normalized = "canceled"
        try:
            return cls(normalized)
        except ValueError:
            return cls.OTHER


class KeyClass(str, Enum):
    """Cache key classes; each carries its own freshness threshold."""

    ACCOUNT = "account"
    POSITIONS = "positions"
    ORDERS = "orders"
    EQUITY_HISTORY = "equity-history"
    PRICE_BARS = "price-bars"


class SeriesSource(str, Enum):
    """Where a series handed to the presentation layer came from."""

    PROVIDER = "provider"
    RECONSTRUCTED = "reconstructed"
    STATIC_SNAPSHOT = "static-snapshot"
    PLACEHOLDER = "placeholder"
    EMPTY = "empty"
