"""
Pydantic models for computed financial summaries.
"""

from typing import Dict, List

from pydantic import BaseModel


class MonthlyEarning(BaseModel):
    month: str
    year: int
    amount: float
    events_count: int


class DJFinancials(BaseModel):
    dj_id: int
    total_earnings: float
    pending_payments: float
    completed_events: int
    average_event_value: float
    commission_rate: float
    commission_amount: float
    net_earnings: float
    growth_percentage: float
    monthly_earnings: List[MonthlyEarning]


class PlatformStats(BaseModel):
    djs_count: int
    producers_active: int
    events_by_status: Dict[str, int]
    contracts_by_status: Dict[str, int]
    total_revenue: float
    pending_revenue: float
    total_contract_value: float
