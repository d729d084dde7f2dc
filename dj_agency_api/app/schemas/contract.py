"""
Pydantic models for contracts between a DJ and a producer for an event.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


ContractStatus = Literal["pending", "signed", "completed", "cancelled"]
SigningParty = Literal["producer", "dj"]


class ContractBase(BaseModel):
    event_id: int
    dj_id: int
    producer_id: int
    contract_value: float = Field(..., ge=0, examples=[50000.0])
    payment_terms: Optional[str] = Field(None, examples=["50% na assinatura, 50% no dia do evento"])
    additional_terms: Optional[str] = None
    equipment_requirements: Optional[str] = None
    performance_duration: Optional[str] = Field(None, examples=["2h"])
    setup_time: Optional[str] = None
    cancellation_policy: Optional[str] = None
    dress_code: Optional[str] = None
    technical_rider: Optional[str] = None


class ContractCreate(ContractBase):
    """Schema for creating a contract."""
    pass


class ContractUpdate(BaseModel):
    contract_value: Optional[float] = Field(None, ge=0)
    payment_terms: Optional[str] = None
    additional_terms: Optional[str] = None
    equipment_requirements: Optional[str] = None
    performance_duration: Optional[str] = None
    setup_time: Optional[str] = None
    cancellation_policy: Optional[str] = None
    dress_code: Optional[str] = None
    technical_rider: Optional[str] = None
    status: Optional[ContractStatus] = None


class ContractSign(BaseModel):
    party: SigningParty


class ContractRead(ContractBase):
    id: int
    status: ContractStatus = "pending"
    commission_rate: Optional[float] = None
    commission_amount: Optional[float] = None
    signed_by_producer: bool = False
    signed_by_dj: bool = False
    signed_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }
