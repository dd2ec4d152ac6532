from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class CheckoutCreate(BaseModel):
    equipment_id: Optional[int] = None
    equipment_code: Optional[str] = None
    use_type: Literal["club", "personal"] = "club"
    purpose: Optional[str] = None
    expected_return: Optional[date] = None

    @model_validator(mode="after")
    def validate_target(self) -> "CheckoutCreate":
        if not self.equipment_id and not (self.equipment_code and self.equipment_code.strip()):
            raise ValueError("equipment_id or equipment_code is required")
        return self


class ReturnRequest(BaseModel):
    condition: Literal["good", "deficiency"] = "good"
    deficiency_description: Optional[str] = None
    severity: Literal["minor", "major"] = "minor"


class CheckoutOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    equipment_id: int
    equipment_code: Optional[str] = None
    equipment_name: Optional[str] = None
    user_id: int
    member_name: Optional[str] = None
    checkout_date: datetime
    expected_return: Optional[date]
    return_date: Optional[datetime]
    use_type: str
    purpose: Optional[str]
    return_condition: Optional[str]
    is_open: bool


class OverdueCheckoutOut(BaseModel):
    checkout: CheckoutOut
    days_overdue: int
