from pydantic import BaseModel, ConfigDict, model_validator
from typing import List, Literal, Optional


PaymentType = Literal["cash", "financing"]


class BudgetSpec(BaseModel):
    """Normalized price constraint: ranking compares against target, the tolerance filter against upper_bound."""
    model_config = ConfigDict(frozen=True)

    target: float
    upper_bound: float

    @model_validator(mode="after")
    def _check_bounds(self) -> "BudgetSpec":
        if self.target < 0 or self.upper_bound < self.target:
            raise ValueError(f"invalid budget: target={self.target}, upper_bound={self.upper_bound}")
        return self


class PreferenceRecord(BaseModel):
    client_name: Optional[str] = None
    location_city: Optional[str] = None
    body_type: Optional[str] = None
    payment_type: Optional[PaymentType] = None
    transmission: Optional[str] = None
    budget: Optional[BudgetSpec] = None


class ExtractionResult(BaseModel):
    """
    Structured output of the qualifier LLM.
    Every key must be present; empty string means "not collected yet".
    """
    model_config = ConfigDict(extra="ignore")

    message: str
    client_name: str
    location_city: str
    body_type: str
    transmission: str
    budget: str
    payment_type: str


class DialogueTurn(BaseModel):
    role: Literal["user", "assistant"]
    text: str


class MatchedVehicle(BaseModel):
    sku: str
    year: Optional[int] = None
    brand: str = ""
    model: str = ""
    variant: str = ""
    transmission: str = ""
    fuel_type: str = ""
    body_type: str = ""
    color: str = ""
    mileage: Optional[float] = None
    city: str = ""
    province: str = ""
    price_status: str = ""
    updated_at: str = ""
    srp: Optional[float] = None
    all_in: Optional[float] = None
    image_1: str = ""
    image_2: str = ""
    image_3: str = ""
    image_4: str = ""
    image_5: str = ""
    drive_link: str = ""
    video_link: str = ""


class MatchResult(BaseModel):
    summary: str
    top_matches: List[MatchedVehicle] = []


class IntakeOutcome(BaseModel):
    record: PreferenceRecord
    is_complete: bool
    reply_message: str
    missing_fields: List[str] = []


class TurnOutcome(BaseModel):
    record: PreferenceRecord
    is_complete: bool
    reply_message: str
    match_result: Optional[MatchResult] = None
