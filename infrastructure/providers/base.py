from datetime import date
from typing import Protocol

from domain.models.currency import HistoricalSeries, RateSnapshot


class ExchangeRateProvider(Protocol):
    @property
    def name(self) -> str:
        ...

    async def get_latest(self, base: str, target: str | None = None) -> RateSnapshot:
        ...

    async def get_historical(self, start: date, end: date, base: str) -> HistoricalSeries:
        ...

    async def close(self) -> None:
        ...
