"""API tests for contracts, signatures, media and financial endpoints."""

import pytest

from tests.conftest import create_dj, create_event

pytestmark = [pytest.mark.api]


@pytest.fixture
def booking(client, admin_headers, producer):
    dj = create_dj(client, admin_headers)
    event = create_event(client, admin_headers, dj_id=dj["id"], producer_id=producer["id"])
    return {"dj": dj, "event": event, "producer": producer}


def _new_contract(client, headers, booking, value=50000.0):
    response = client.post(
        "/api/v1/contracts/",
        json={
            "event_id": booking["event"]["id"],
            "dj_id": booking["dj"]["id"],
            "producer_id": booking["producer"]["id"],
            "contract_value": value,
            "performance_duration": "2h",
            "additional_terms": "Camarim com água e frutas",
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestContracts:
    def test_commission_is_captured(self, client, admin_headers, booking):
        contract = _new_contract(client, admin_headers, booking)
        assert contract["status"] == "pending"
        assert contract["commission_rate"] == 20.0
        assert contract["commission_amount"] == 10000.0
        assert contract["additional_terms"] == "Camarim com água e frutas"

    def test_update_recomputes_commission(self, client, admin_headers, booking):
        contract = _new_contract(client, admin_headers, booking)
        updated = client.put(
            f"/api/v1/contracts/{contract['id']}", json={"contract_value": 60000.0}, headers=admin_headers
        ).json()
        assert updated["commission_amount"] == 12000.0
        assert updated["performance_duration"] == "2h"

    def test_null_clears_terms(self, client, admin_headers, booking):
        contract = _new_contract(client, admin_headers, booking)
        updated = client.put(
            f"/api/v1/contracts/{contract['id']}",
            json={"additional_terms": None, "contract_value": None},
            headers=admin_headers,
        ).json()
        assert updated["additional_terms"] is None
        assert updated["contract_value"] == 50000.0
        assert updated["performance_duration"] == "2h"

    def test_references_must_exist(self, client, admin_headers, booking):
        response = client.post(
            "/api/v1/contracts/",
            json={"event_id": 404, "dj_id": booking["dj"]["id"], "producer_id": booking["producer"]["id"],
                  "contract_value": 1.0},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_parties_must_match_the_event(self, client, admin_headers, producer_headers, booking):
        other_producer = client.post(
            "/api/v1/producers/", json={"name": "Outra", "email": "outra@x.com"}, headers=admin_headers
        ).json()
        other_event = create_event(client, admin_headers, producer_id=other_producer["id"])
        other_dj = create_dj(client, admin_headers, name="Outro DJ")

        wrong_producer = client.post(
            "/api/v1/contracts/",
            json={"event_id": other_event["id"], "dj_id": booking["dj"]["id"],
                  "producer_id": booking["producer"]["id"], "contract_value": 1000.0},
            headers=admin_headers,
        )
        wrong_dj = client.post(
            "/api/v1/contracts/",
            json={"event_id": booking["event"]["id"], "dj_id": other_dj["id"],
                  "producer_id": booking["producer"]["id"], "contract_value": 1000.0},
            headers=admin_headers,
        )
        assert wrong_producer.status_code == 400
        assert wrong_dj.status_code == 400
        assert client.get("/api/v1/contracts/", headers=producer_headers).json() == []

    def test_newest_first_and_status_filter(self, client, admin_headers, booking):
        first = _new_contract(client, admin_headers, booking)
        second = _new_contract(client, admin_headers, booking, value=1000.0)
        client.put(f"/api/v1/contracts/{first['id']}", json={"status": "cancelled"}, headers=admin_headers)

        listed = client.get("/api/v1/contracts/", headers=admin_headers).json()
        assert [c["id"] for c in listed] == [second["id"], first["id"]]
        cancelled = client.get("/api/v1/contracts/", params={"status": "cancelled"}, headers=admin_headers).json()
        assert [c["id"] for c in cancelled] == [first["id"]]

    def test_delete(self, client, admin_headers, booking):
        contract = _new_contract(client, admin_headers, booking)
        assert client.delete(f"/api/v1/contracts/{contract['id']}", headers=admin_headers).status_code == 204
        assert client.delete(f"/api/v1/contracts/{contract['id']}", headers=admin_headers).status_code == 404


class TestSigning:
    def test_both_signatures_mark_contract_signed(self, client, admin_headers, producer_headers, booking):
        contract = _new_contract(client, admin_headers, booking)
        url = f"/api/v1/contracts/{contract['id']}/sign"

        after_producer = client.post(url, json={"party": "producer"}, headers=producer_headers).json()
        assert after_producer["signed_by_producer"] is True
        assert after_producer["status"] == "pending"
        assert after_producer["signed_date"] is None

        after_dj = client.post(url, json={"party": "dj"}, headers=admin_headers).json()
        assert after_dj["signed_by_dj"] is True
        assert after_dj["status"] == "signed"
        assert after_dj["signed_date"] is not None

    def test_producer_cannot_sign_for_dj(self, client, admin_headers, producer_headers, booking):
        contract = _new_contract(client, admin_headers, booking)
        response = client.post(
            f"/api/v1/contracts/{contract['id']}/sign", json={"party": "dj"}, headers=producer_headers
        )
        assert response.status_code == 403

    def test_cancelled_contract_cannot_be_signed(self, client, admin_headers, booking):
        contract = _new_contract(client, admin_headers, booking)
        client.put(f"/api/v1/contracts/{contract['id']}", json={"status": "cancelled"}, headers=admin_headers)
        response = client.post(
            f"/api/v1/contracts/{contract['id']}/sign", json={"party": "producer"}, headers=admin_headers
        )
        assert response.status_code == 400

    def test_producer_scope(self, client, admin_headers, producer_headers, booking):
        mine = _new_contract(client, admin_headers, booking)
        other_producer = client.post(
            "/api/v1/producers/", json={"name": "Outra", "email": "outra@x.com"}, headers=admin_headers
        ).json()
        other_event = create_event(client, admin_headers, producer_id=other_producer["id"])
        other = client.post(
            "/api/v1/contracts/",
            json={"event_id": other_event["id"], "dj_id": booking["dj"]["id"],
                  "producer_id": other_producer["id"], "contract_value": 1000.0},
            headers=admin_headers,
        ).json()

        listed = client.get("/api/v1/contracts/", headers=producer_headers).json()
        assert [c["id"] for c in listed] == [mine["id"]]
        assert client.get(f"/api/v1/contracts/{other['id']}", headers=producer_headers).status_code == 403
        sign = client.post(f"/api/v1/contracts/{other['id']}/sign", json={"party": "producer"}, headers=producer_headers)
        assert sign.status_code == 403
        assert client.post("/api/v1/contracts/", json={}, headers=producer_headers).status_code in (403, 422)


class TestMedia:
    def test_owner_is_required(self, client, admin_headers):
        response = client.post("/api/v1/media/", json={"file_url": "https://x/y.png"}, headers=admin_headers)
        assert response.status_code == 422

    def test_unknown_owner(self, client, admin_headers):
        response = client.post("/api/v1/media/", json={"dj_id": 404, "file_url": "https://x/y.png"}, headers=admin_headers)
        assert response.status_code == 400

    def test_crud_and_filters(self, client, admin_headers, booking):
        presskit = client.post(
            "/api/v1/media/",
            json={"dj_id": booking["dj"]["id"], "file_url": "https://x/presskit.pdf", "category": "presskit"},
            headers=admin_headers,
        ).json()
        logo = client.post(
            "/api/v1/media/",
            json={"event_id": booking["event"]["id"], "file_url": "https://x/logo.png", "category": "logo"},
            headers=admin_headers,
        ).json()

        listed = client.get("/api/v1/media/", headers=admin_headers).json()
        assert [m["id"] for m in listed] == [logo["id"], presskit["id"]]
        logos = client.get("/api/v1/media/", params={"category": "logo"}, headers=admin_headers).json()
        assert [m["id"] for m in logos] == [logo["id"]]

        updated = client.put(f"/api/v1/media/{logo['id']}", json={"title": "Logo oficial"}, headers=admin_headers)
        assert updated.json()["title"] == "Logo oficial"
        cleared = client.put(f"/api/v1/media/{logo['id']}", json={"title": None}, headers=admin_headers)
        assert cleared.json()["title"] is None
        assert cleared.json()["category"] == "logo"
        assert client.delete(f"/api/v1/media/{logo['id']}", headers=admin_headers).status_code == 204
        assert client.get(f"/api/v1/media/{logo['id']}", headers=admin_headers).status_code == 404

    def test_producer_sees_media_of_booked_djs_and_own_events(self, client, admin_headers, producer_headers, booking):
        other_dj = create_dj(client, admin_headers, name="Outro DJ")
        visible = client.post(
            "/api/v1/media/",
            json={"dj_id": booking["dj"]["id"], "file_url": "https://x/a.png"},
            headers=admin_headers,
        ).json()
        hidden = client.post(
            "/api/v1/media/",
            json={"dj_id": other_dj["id"], "file_url": "https://x/b.png"},
            headers=admin_headers,
        ).json()

        listed = client.get("/api/v1/media/", headers=producer_headers).json()
        assert [m["id"] for m in listed] == [visible["id"]]
        assert client.get(f"/api/v1/media/{hidden['id']}", headers=producer_headers).status_code == 403


class TestFinancialEndpoints:
    def test_admin_reads_dj_financials(self, client, admin_headers, booking):
        client.patch(
            f"/api/v1/events/{booking['event']['id']}/status", json={"status": "completed"}, headers=admin_headers
        )
        data = client.get(f"/api/v1/financials/djs/{booking['dj']['id']}", headers=admin_headers).json()
        assert data["total_earnings"] == 30000.0
        assert data["completed_events"] == 1
        assert data["net_earnings"] == 24000.0
        assert len(data["monthly_earnings"]) == 6

    def test_overview(self, client, admin_headers, booking):
        data = client.get("/api/v1/financials/overview", headers=admin_headers).json()
        assert data["djs_count"] == 1
        assert data["pending_revenue"] == 30000.0

    def test_producers_are_refused(self, client, producer_headers, booking):
        assert client.get("/api/v1/financials/overview", headers=producer_headers).status_code == 403
        response = client.get(f"/api/v1/financials/djs/{booking['dj']['id']}", headers=producer_headers)
        assert response.status_code == 403

    def test_unknown_dj(self, client, admin_headers):
        assert client.get("/api/v1/financials/djs/404", headers=admin_headers).status_code == 404
