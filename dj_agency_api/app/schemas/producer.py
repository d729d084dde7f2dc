"""
Pydantic models for producers, the client organisations that book DJs.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


ProducerStatus = Literal["active", "inactive"]


class ProducerBase(BaseModel):
    name: str = Field(..., min_length=1, examples=["Festa Company"])
    company_name: Optional[str] = Field(None, examples=["Festa Company Ltda"])
    email: str = Field(..., examples=["contato@festacompany.com"])
    phone: Optional[str] = Field(None, examples=["(11) 3333-4444"])
    address: Optional[str] = None
    city: Optional[str] = Field(None, examples=["São Paulo"])
    state: Optional[str] = Field(None, examples=["SP"])
    zip_code: Optional[str] = None
    contact_person: Optional[str] = Field(None, examples=["João Silva"])
    status: ProducerStatus = "active"


class ProducerCreate(ProducerBase):
    """Schema for registering a producer."""
    pass


class ProducerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    company_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    contact_person: Optional[str] = None
    status: Optional[ProducerStatus] = None


class ProducerRead(ProducerBase):
    id: int
    events_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class AccessCodeRead(BaseModel):
    producer_id: int
    access_code: str
