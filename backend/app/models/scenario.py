from typing import Optional

from pydantic import BaseModel, Field, model_validator


class BaseScenario(BaseModel):
    """Loan terms a stress run starts from. Rates are annual percentages (5.75 = 5.75%)."""
    interest_rate: float = Field(gt=0, allow_inf_nan=False)
    property_price: float = Field(gt=0, allow_inf_nan=False)
    down_payment: float = Field(ge=0, allow_inf_nan=False)
    term_years: int = Field(ge=1)
    income: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_down_payment(self) -> "BaseScenario":
        if self.down_payment >= self.property_price:
            raise ValueError(
                f"down_payment ({self.down_payment}) must be less than "
                f"property_price ({self.property_price})"
            )
        return self

    @property
    def principal(self) -> float:
        return self.property_price - self.down_payment


class NamedScenario(BaseModel):
    """One point on a stress ladder, e.g. ("Severe Shock", 3.0)."""
    name: str
    magnitude: float = Field(allow_inf_nan=False)

    model_config = {"frozen": True}
