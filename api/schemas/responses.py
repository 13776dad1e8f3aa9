from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from domain.models.currency import ConversionResult, PagedHistoricalResult, RateSnapshot


class ExchangeRateResponse(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	amount: Decimal = Field(..., description='Amount of base currency the rates refer to')
	base_currency: str = Field(..., alias='base', description='Base currency code')
	date: str = Field(..., description='Date the rates were published')
	rates: dict[str, Decimal] = Field(..., description='Rate per target currency')

	@classmethod
	def from_domain(cls, snapshot: RateSnapshot) -> 'ExchangeRateResponse':
		return cls(
			amount=snapshot.amount,
			base_currency=snapshot.base_currency,
			date=snapshot.as_of,
			rates=snapshot.rates,
		)


class ConversionResponse(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	from_currency: str = Field(..., alias='from', description='Source currency code')
	to_currency: str = Field(..., alias='to', description='Target currency code')
	amount: Decimal = Field(..., description='Original amount requested')
	converted_amount: Decimal = Field(..., alias='convertedAmount', description='Converted amount')

	@classmethod
	def from_domain(cls, result: ConversionResult) -> 'ConversionResponse':
		return cls(
			from_currency=result.from_currency,
			to_currency=result.to_currency,
			amount=result.amount,
			converted_amount=result.converted_amount,
		)


class HistoricalExchangeRateResponse(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	amount: Decimal
	base_currency: str = Field(..., alias='base')
	start_date: date
	end_date: date
	rates: dict[date, dict[str, Decimal]]
	total_records: int = Field(..., alias='totalRecords')
	page: int
	page_size: int = Field(..., alias='pageSize')

	@classmethod
	def from_domain(cls, result: PagedHistoricalResult) -> 'HistoricalExchangeRateResponse':
		return cls(
			amount=result.amount,
			base_currency=result.base_currency,
			start_date=result.start_date,
			end_date=result.end_date,
			rates=result.rates,
			total_records=result.total_records,
			page=result.page,
			page_size=result.page_size,
		)
