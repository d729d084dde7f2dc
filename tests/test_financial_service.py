"""Service-level tests for computed financial summaries."""

from datetime import datetime

import pytest
import pytest_asyncio

from dj_agency_api.app.core.errors import NotFoundError
from dj_agency_api.app.schemas.contract import ContractCreate
from dj_agency_api.app.schemas.dj import DJCreate
from dj_agency_api.app.schemas.event import EventCreate
from dj_agency_api.app.schemas.producer import ProducerCreate
from dj_agency_api.app.services.contract_service import ContractService
from dj_agency_api.app.services.dj_service import DJService
from dj_agency_api.app.services.event_service import EventService
from dj_agency_api.app.services.financial_service import FinancialService
from dj_agency_api.app.services.producer_service import ProducerService

pytestmark = [pytest.mark.asyncio]


async def _book(admin, dj_id, when, status, fee, producer_id=None):
    return await EventService.create_event(
        EventCreate(
            title=f"{status} {when:%Y-%m}",
            event_date=when,
            dj_id=dj_id,
            producer_id=producer_id,
            status=status,
            booking_fee=fee,
        ),
        admin,
    )


@pytest_asyncio.fixture
async def dj_with_history(db_path, admin_context):
    dj = await DJService.create_dj(DJCreate(name="DJ Alok", booking_price=50000.0), admin_context)
    await _book(admin_context, dj.id, datetime(2025, 3, 10, 22), "completed", 1000.0)
    await _book(admin_context, dj.id, datetime(2025, 2, 10, 22), "completed", 500.0)
    await _book(admin_context, dj.id, datetime(2025, 1, 5, 22), "completed", 300.0)
    await _book(admin_context, dj.id, datetime(2025, 4, 1, 22), "pending", 2000.0)
    await _book(admin_context, dj.id, datetime(2025, 4, 20, 22), "confirmed", 1000.0)
    await _book(admin_context, dj.id, datetime(2025, 3, 1, 22), "cancelled", 9999.0)
    return dj


class TestDJFinancials:
    async def test_totals(self, dj_with_history):
        data = await FinancialService.dj_financials(dj_with_history.id, now=datetime(2025, 3, 15))
        assert data.total_earnings == 1800.0
        assert data.pending_payments == 3000.0
        assert data.completed_events == 3
        assert data.average_event_value == 600.0
        assert data.commission_rate == 20.0
        assert data.commission_amount == 360.0
        assert data.net_earnings == 1440.0

    async def test_last_six_months_with_portuguese_labels(self, dj_with_history):
        data = await FinancialService.dj_financials(dj_with_history.id, now=datetime(2025, 3, 15))
        assert [(m.month, m.year) for m in data.monthly_earnings] == [
            ("Out", 2024),
            ("Nov", 2024),
            ("Dez", 2024),
            ("Jan", 2025),
            ("Fev", 2025),
            ("Mar", 2025),
        ]
        assert [m.amount for m in data.monthly_earnings] == [0, 0, 0, 300.0, 500.0, 1000.0]
        assert data.monthly_earnings[-1].events_count == 1
        assert data.growth_percentage == 100.0

    async def test_growth_is_zero_without_previous_month(self, dj_with_history):
        data = await FinancialService.dj_financials(dj_with_history.id, now=datetime(2025, 5, 2))
        assert data.monthly_earnings[-2].amount == 0
        assert data.growth_percentage == 0.0

    async def test_dj_without_events(self, db_path, admin_context):
        dj = await DJService.create_dj(DJCreate(name="Novato"), admin_context)
        data = await FinancialService.dj_financials(dj.id)
        assert data.total_earnings == 0
        assert data.average_event_value == 0
        assert len(data.monthly_earnings) == 6

    async def test_unknown_dj(self, db_path):
        with pytest.raises(NotFoundError):
            await FinancialService.dj_financials(404)


class TestPlatformStats:
    async def test_counts_and_revenue(self, dj_with_history, admin_context):
        producer = await ProducerService.create_producer(
            ProducerCreate(name="Festa Company", email="contato@festacompany.com"), admin_context
        )
        event = await _book(
            admin_context, dj_with_history.id, datetime(2025, 6, 1, 22), "confirmed", 4000.0, producer.id
        )
        contract = await ContractService.create_contract(
            ContractCreate(
                event_id=event.id,
                dj_id=dj_with_history.id,
                producer_id=producer.id,
                contract_value=4000.0,
            ),
            admin_context,
        )
        assert contract.commission_amount == 800.0

        stats = await FinancialService.platform_stats()
        assert stats.djs_count == 1
        assert stats.producers_active == 1
        assert stats.events_by_status == {"pending": 1, "confirmed": 2, "completed": 3, "cancelled": 1}
        assert stats.contracts_by_status == {"pending": 1, "signed": 0, "completed": 0, "cancelled": 0}
        assert stats.total_revenue == 1800.0
        assert stats.pending_revenue == 7000.0
        assert stats.total_contract_value == 4000.0
