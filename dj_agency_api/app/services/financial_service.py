"""
Computed financial summaries.

Nothing here is stored: earnings are derived from event fees every time.
Completed events count as earned, pending and confirmed events as money
still to be received.  Month labels use the Portuguese abbreviations the
agency reports in.
"""

import logging
from collections import Counter
from datetime import datetime
from typing import List, Optional, Tuple

from dj_agency_api.app.core.config import settings
from dj_agency_api.app.core.db import get_connection
from dj_agency_api.app.core.errors import NotFoundError
from dj_agency_api.app.schemas.event import EventRead
from dj_agency_api.app.schemas.financial import DJFinancials, MonthlyEarning, PlatformStats
from dj_agency_api.app.services.mappers import (
    CONTRACT_STATUS_TO_DB,
    EVENT_STATUS_TO_DB,
    contract_status_from_db,
    event_from_row,
    event_status_from_db,
)


logger = logging.getLogger(__name__)

MONTH_LABELS = ["Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez"]
MONTHS_SHOWN = 6


def _shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def _fee(event: EventRead) -> float:
    return event.booking_fee or 0.0


class FinancialService:
    """Earnings per DJ and platform-wide totals."""

    @classmethod
    async def dj_financials(cls, dj_id: int, now: Optional[datetime] = None) -> DJFinancials:
        """Summarise the earnings of one DJ.

        ``monthly_earnings`` covers the six calendar months ending with the
        month of ``now``, oldest first.  ``growth_percentage`` compares the
        last two of them and is 0 when the previous month earned nothing.
        """
        now = now or datetime.now()
        conn = get_connection()
        try:
            if not conn.execute("SELECT id FROM djs WHERE id = ?", (dj_id,)).fetchone():
                raise NotFoundError(f"DJ {dj_id} not found")
            rows = conn.execute(
                "SELECT * FROM events WHERE dj_id = ? ORDER BY event_date", (dj_id,)
            ).fetchall()
        finally:
            conn.close()
        events = [event_from_row(row) for row in rows]
        completed = [e for e in events if e.status == "completed"]
        pending = [e for e in events if e.status in ("pending", "confirmed")]

        total = sum(_fee(e) for e in completed)
        rate = settings.commission_rate
        commission = round(total * rate / 100, 2)

        monthly: List[MonthlyEarning] = []
        for offset in range(MONTHS_SHOWN - 1, -1, -1):
            year, month = _shift_month(now.year, now.month, -offset)
            in_month = [
                e for e in completed if e.event_date.year == year and e.event_date.month == month
            ]
            monthly.append(
                MonthlyEarning(
                    month=MONTH_LABELS[month - 1],
                    year=year,
                    amount=sum(_fee(e) for e in in_month),
                    events_count=len(in_month),
                )
            )

        current, previous = monthly[-1].amount, monthly[-2].amount
        growth = (current - previous) / previous * 100 if previous > 0 else 0.0

        return DJFinancials(
            dj_id=dj_id,
            total_earnings=total,
            pending_payments=sum(_fee(e) for e in pending),
            completed_events=len(completed),
            average_event_value=total / len(completed) if completed else 0.0,
            commission_rate=rate,
            commission_amount=commission,
            net_earnings=total - commission,
            growth_percentage=round(growth, 2),
            monthly_earnings=monthly,
        )

    @classmethod
    async def platform_stats(cls) -> PlatformStats:
        """Totals across the whole agency.

        ``total_contract_value`` ignores cancelled contracts.
        """
        conn = get_connection()
        try:
            djs_count = conn.execute("SELECT COUNT(*) FROM djs WHERE is_active = 1").fetchone()[0]
            producers_active = conn.execute(
                "SELECT COUNT(*) FROM producers WHERE is_active = 1"
            ).fetchone()[0]
            event_rows = conn.execute("SELECT status, fee FROM events").fetchall()
            contract_rows = conn.execute("SELECT status, fee FROM contracts").fetchall()
        finally:
            conn.close()

        events_by_status = Counter(event_status_from_db(row["status"]) for row in event_rows)
        contracts_by_status = Counter(contract_status_from_db(row["status"]) for row in contract_rows)
        total_revenue = 0.0
        pending_revenue = 0.0
        for row in event_rows:
            status = event_status_from_db(row["status"])
            if status == "completed":
                total_revenue += row["fee"] or 0
            elif status in ("pending", "confirmed"):
                pending_revenue += row["fee"] or 0
        total_contract_value = sum(
            row["fee"] or 0
            for row in contract_rows
            if contract_status_from_db(row["status"]) != "cancelled"
        )
        logger.debug("Platform stats computed over %d events", len(event_rows))
        return PlatformStats(
            djs_count=djs_count,
            producers_active=producers_active,
            events_by_status={s: events_by_status.get(s, 0) for s in EVENT_STATUS_TO_DB},
            contracts_by_status={s: contracts_by_status.get(s, 0) for s in CONTRACT_STATUS_TO_DB},
            total_revenue=total_revenue,
            pending_revenue=pending_revenue,
            total_contract_value=total_contract_value,
        )
