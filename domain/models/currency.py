import math
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class RateSnapshot:
    amount: Decimal
    base_currency: str
    as_of: str
    rates: dict[str, Decimal] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe form used for cache storage."""
        return {
            'amount': str(self.amount),
            'base': self.base_currency,
            'date': self.as_of,
            'rates': {code: str(rate) for code, rate in self.rates.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'RateSnapshot':
        return cls(
            amount=Decimal(data['amount']),
            base_currency=data['base'],
            as_of=data['date'],
            rates={code: Decimal(rate) for code, rate in data['rates'].items()},
        )


@dataclass(frozen=True)
class HistoricalSeries:
    amount: Decimal
    base_currency: str
    start_date: date
    end_date: date
    rates: dict[date, dict[str, Decimal]] = field(default_factory=dict)


@dataclass(frozen=True)
class ConversionResult:
    from_currency: str
    to_currency: str
    amount: Decimal
    converted_amount: Decimal


@dataclass(frozen=True)
class PagedHistoricalResult:
    amount: Decimal
    base_currency: str
    start_date: date
    end_date: date
    rates: dict[date, dict[str, Decimal]]
    page: int
    page_size: int
    total_records: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_records / self.page_size)
