"""Tests for the translation between stored rows and API models."""

from dj_agency_api.app.services.mappers import (
    UNNAMED_PRODUCER,
    contract_from_row,
    contract_to_columns,
    dj_from_row,
    dj_to_columns,
    event_from_row,
    event_to_columns,
    producer_from_row,
    producer_to_columns,
)


def _dj_row(**overrides):
    row = {
        "id": 1,
        "artist_name": "DJ Alok",
        "real_name": "Alok Petrillo",
        "bio": None,
        "avatar_url": "https://cdn.example.com/alok.jpg",
        "genres": '["House", "Brazilian Bass"]',
        "phone": None,
        "whatsapp": "(11) 99999-0000",
        "email": "booking@alok.com",
        "instagram": "@alok",
        "base_price": 50000.0,
        "status": "disponivel",
        "is_active": 1,
        "created_at": "2025-01-01 10:00:00",
        "updated_at": "2025-01-01 10:00:00",
    }
    row.update(overrides)
    return row


def _event_row(**overrides):
    row = {
        "id": 5,
        "event_name": "Festival de Verão",
        "description": None,
        "event_date": "2025-01-15T22:00:00",
        "venue": None,
        "address": "São Paulo",
        "state": None,
        "fee": 30000.0,
        "expected_attendees": 5000,
        "dj_id": 1,
        "producer_id": 2,
        "status": "confirmado",
        "created_at": None,
        "updated_at": None,
    }
    row.update(overrides)
    return row


def test_dj_row_is_translated():
    dj = dj_from_row(_dj_row())
    assert dj.name == "DJ Alok"
    assert dj.booking_price == 50000.0
    assert dj.profile_image_url == "https://cdn.example.com/alok.jpg"
    assert dj.phone == "(11) 99999-0000"
    assert dj.genres == ["House", "Brazilian Bass"]
    assert dj.availability_status == "available"


def test_dj_unknown_status_and_bad_genres():
    dj = dj_from_row(_dj_row(status="ferias", genres="not json"))
    assert dj.availability_status == "unavailable"
    assert dj.genres == []


def test_dj_columns_only_include_given_fields():
    columns = dj_to_columns({"booking_price": 1000.0, "availability_status": "busy"})
    assert columns == {"base_price": 1000.0, "status": "ocupado"}

    created = dj_to_columns({"name": "Anitta", "phone": "123", "genres": None}, creating=True)
    assert created["artist_name"] == created["real_name"] == "Anitta"
    assert created["whatsapp"] == created["phone"] == "123"
    assert created["genres"] == "[]"


def test_event_row_is_translated():
    event = event_from_row(_event_row())
    assert event.title == "Festival de Verão"
    assert event.city == "São Paulo"
    assert event.venue == ""
    assert event.state == ""
    assert event.booking_fee == 30000.0
    assert event.expected_attendance == 5000
    assert event.status == "confirmed"


def test_event_unknown_status_maps_to_cancelled():
    assert event_from_row(_event_row(status="adiado")).status == "cancelled"


def test_event_columns_translate_names_and_status():
    columns = event_to_columns({"title": "Rave", "city": "Rio", "status": "completed", "dj_id": None})
    assert columns == {"event_name": "Rave", "address": "Rio", "status": "concluido", "dj_id": None}


def test_contract_terms_and_status():
    columns = contract_to_columns(
        {"contract_value": 5000.0, "additional_terms": "Camarim com frutas", "status": "signed"}
    )
    assert columns["fee"] == 5000.0
    assert columns["status"] == "assinado"
    row = {
        "id": 1,
        "event_id": 5,
        "dj_id": 1,
        "producer_id": 2,
        "fee": 5000.0,
        "commission_rate": 20.0,
        "commission_amount": 1000.0,
        "payment_terms": None,
        "custom_clauses": columns["custom_clauses"],
        "equipment_requirements": None,
        "performance_duration": "2h",
        "setup_time": None,
        "cancellation_policy": None,
        "dress_code": None,
        "technical_rider": None,
        "status": "assinado",
        "is_signed_by_producer": 1,
        "is_signed_by_dj": 0,
        "signed_at": None,
        "created_at": None,
        "updated_at": None,
    }
    contract = contract_from_row(row)
    assert contract.additional_terms == "Camarim com frutas"
    assert contract.contract_value == 5000.0
    assert contract.status == "signed"
    assert contract.signed_by_producer is True
    assert contract.signed_by_dj is False


def test_producer_name_fallbacks():
    base = {
        "id": 3,
        "name": None,
        "company_name": "Festa Company Ltda",
        "contact_email": None,
        "contact_phone": "(11) 3333-4444",
        "business_address": "Rua Augusta, 100",
        "city": "São Paulo",
        "state": "SP",
        "zip_code": None,
        "contact_person": None,
        "is_active": 0,
        "created_at": None,
        "updated_at": None,
    }
    producer = producer_from_row(base)
    assert producer.name == "Festa Company Ltda"
    assert producer.email == ""
    assert producer.address == "Rua Augusta, 100"
    assert producer.status == "inactive"
    assert producer.events_count == 0

    anonymous = producer_from_row(dict(base, company_name=None))
    assert anonymous.name == UNNAMED_PRODUCER


def test_producer_columns():
    assert producer_to_columns({"email": "a@b.com", "status": "active"}) == {
        "contact_email": "a@b.com",
        "is_active": 1,
    }
