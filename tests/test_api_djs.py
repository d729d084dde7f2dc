"""API tests for the DJ roster."""

import pytest

from tests.conftest import auth_headers, create_dj, create_event

pytestmark = [pytest.mark.api]


@pytest.fixture
def roster(client, admin_headers):
    return [
        create_dj(client, admin_headers, name="Vintage Culture", genres=["House", "Deep House"], booking_price=35000.0),
        create_dj(client, admin_headers, name="Alok", genres=["Brazilian Bass"], booking_price=50000.0,
                  availability_status="busy"),
        create_dj(client, admin_headers, name="Anitta", genres=["Funk", "Pop"], booking_price=None,
                  bio="Cantora e DJ"),
    ]


class TestListing:
    def test_sorted_by_name_by_default(self, client, admin_headers, roster):
        names = [dj["name"] for dj in client.get("/api/v1/djs/", headers=admin_headers).json()]
        assert names == ["Alok", "Anitta", "Vintage Culture"]

    def test_sort_by_price_descending_treats_missing_as_zero(self, client, admin_headers, roster):
        response = client.get("/api/v1/djs/", params={"sort_by": "price", "order": "desc"}, headers=admin_headers)
        assert [dj["name"] for dj in response.json()] == ["Alok", "Vintage Culture", "Anitta"]

    def test_search_matches_name_bio_and_genres(self, client, admin_headers, roster):
        def search(term):
            response = client.get("/api/v1/djs/", params={"search": term}, headers=admin_headers)
            return [dj["name"] for dj in response.json()]

        assert search("vintage") == ["Vintage Culture"]
        assert search("cantora") == ["Anitta"]
        assert search("house") == ["Vintage Culture"]

    def test_genre_and_status_filters(self, client, admin_headers, roster):
        by_genre = client.get("/api/v1/djs/", params={"genre": "Funk"}, headers=admin_headers).json()
        busy = client.get("/api/v1/djs/", params={"status": "busy"}, headers=admin_headers).json()
        assert [dj["name"] for dj in by_genre] == ["Anitta"]
        assert [dj["name"] for dj in busy] == ["Alok"]

    def test_stats(self, client, admin_headers, roster):
        stats = client.get("/api/v1/djs/stats", headers=admin_headers).json()
        assert stats["total"] == 3
        assert stats["available"] == 2
        assert stats["busy"] == 1
        assert stats["avg_price"] == pytest.approx(85000.0 / 3)
        assert stats["top_genres"] == ["Brazilian Bass", "Funk", "Pop"]


class TestProducerVisibility:
    def test_producer_sees_only_booked_djs(self, client, admin_headers, producer, producer_headers, roster):
        vintage, alok, _ = roster
        create_event(client, admin_headers, dj_id=alok["id"], producer_id=producer["id"])
        create_event(client, admin_headers, dj_id=vintage["id"])

        visible = client.get("/api/v1/djs/", headers=producer_headers).json()
        assert [dj["id"] for dj in visible] == [alok["id"]]
        assert client.get(f"/api/v1/djs/{alok['id']}", headers=producer_headers).status_code == 200
        assert client.get(f"/api/v1/djs/{vintage['id']}", headers=producer_headers).status_code == 403

        stats = client.get("/api/v1/djs/stats", headers=producer_headers).json()
        assert stats["total"] == 1

    def test_unlinked_producer_sees_nothing(self, client, admin_headers, roster):
        headers = auth_headers(client, "sem.vinculo@festa.com")
        assert client.get("/api/v1/djs/", headers=headers).json() == []

    def test_producer_cannot_create_or_edit(self, client, producer_headers, roster):
        assert client.post("/api/v1/djs/", json={"name": "Novo"}, headers=producer_headers).status_code == 403
        response = client.put(f"/api/v1/djs/{roster[0]['id']}", json={"bio": "x"}, headers=producer_headers)
        assert response.status_code == 403


class TestMaintenance:
    def test_partial_update(self, client, admin_headers, roster):
        dj = roster[0]
        response = client.put(
            f"/api/v1/djs/{dj['id']}",
            json={"booking_price": 40000.0, "availability_status": "unavailable"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["booking_price"] == 40000.0
        assert body["availability_status"] == "unavailable"
        assert body["genres"] == dj["genres"]

    def test_unknown_dj(self, client, admin_headers):
        assert client.get("/api/v1/djs/999", headers=admin_headers).status_code == 404
        assert client.put("/api/v1/djs/999", json={"bio": "x"}, headers=admin_headers).status_code == 404

    def test_delete_is_soft_and_detaches_upcoming_events(self, client, admin_headers, roster):
        dj = roster[1]
        upcoming = create_event(client, admin_headers, dj_id=dj["id"], status="confirmed")
        past = create_event(client, admin_headers, dj_id=dj["id"], status="completed")
        client.post(
            "/api/v1/media/",
            json={"dj_id": dj["id"], "file_url": "https://cdn.example.com/alok.jpg"},
            headers=admin_headers,
        )

        assert client.delete(f"/api/v1/djs/{dj['id']}", headers=admin_headers).status_code == 204
        assert client.get(f"/api/v1/djs/{dj['id']}", headers=admin_headers).status_code == 404
        assert dj["id"] not in [d["id"] for d in client.get("/api/v1/djs/", headers=admin_headers).json()]
        assert client.get(f"/api/v1/events/{upcoming['id']}", headers=admin_headers).json()["dj_id"] is None
        assert client.get(f"/api/v1/events/{past['id']}", headers=admin_headers).json()["dj_id"] == dj["id"]
        assert client.get("/api/v1/media/", params={"dj_id": dj["id"]}, headers=admin_headers).json() == []

    def test_null_clears_optional_fields_only(self, client, admin_headers, roster):
        anitta = roster[2]
        response = client.put(
            f"/api/v1/djs/{anitta['id']}", json={"bio": None, "name": None, "genres": None}, headers=admin_headers
        )
        assert response.status_code == 200
        body = response.json()
        assert body["bio"] is None
        assert body["name"] == "Anitta"
        assert body["genres"] == ["Funk", "Pop"]
