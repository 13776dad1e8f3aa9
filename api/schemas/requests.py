from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

CURRENCY_CODE_PATTERN = r'^[A-Z]{3}$'


def _normalize_code(v: str) -> str:
	return v.strip().upper()


class LatestRatesRequest(BaseModel):
	base_currency: str = Field(..., pattern=CURRENCY_CODE_PATTERN)
	target_currency: str | None = Field(None, pattern=CURRENCY_CODE_PATTERN)
	provider: str = 'FrankfurterAPI'

	@field_validator('base_currency', 'target_currency', mode='before')
	@classmethod
	def uppercase_currency(cls, v: str | None):
		return _normalize_code(v) if isinstance(v, str) else v


class ConversionRequest(BaseModel):
	model_config = ConfigDict(
		json_schema_extra={'example': {'from_currency': 'USD', 'to_currency': 'EUR', 'amount': 100.00}}
	)

	from_currency: str = Field(..., pattern=CURRENCY_CODE_PATTERN)
	to_currency: str = Field(..., pattern=CURRENCY_CODE_PATTERN)
	amount: Decimal = Field(..., gt=0)
	provider: str = 'FrankfurterAPI'

	@field_validator('from_currency', 'to_currency', mode='before')
	@classmethod
	def uppercase_currency(cls, v: str):
		return _normalize_code(v) if isinstance(v, str) else v


class HistoricalRatesRequest(BaseModel):
	base_currency: str = Field(..., pattern=CURRENCY_CODE_PATTERN)
	start_date: date
	end_date: date
	page: int = Field(1, gt=0)
	page_size: int = Field(10, gt=0)
	provider: str = 'FrankfurterAPI'

	@field_validator('base_currency', mode='before')
	@classmethod
	def uppercase_currency(cls, v: str):
		return _normalize_code(v) if isinstance(v, str) else v

	@field_validator('start_date', 'end_date')
	@classmethod
	def not_in_future(cls, v: date, info: ValidationInfo):
		if v > date.today():
			raise ValueError(f'{info.field_name} cannot be in the future')
		return v

	@model_validator(mode='after')
	def start_before_end(self):
		if self.start_date > self.end_date:
			raise ValueError('start_date must be before or equal to end_date')
		return self
