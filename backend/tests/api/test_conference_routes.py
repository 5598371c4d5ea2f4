"""Conference Routes — create, read, catalog, and organizer overrides over HTTP.

Invariants:
    - Responses carry stored status and computed status side by side
    - Legacy timestamp shapes are accepted on create
    - Domain errors map to structured JSON (404, 409, 400)
"""

from datetime import timedelta

from conference_status.models.conference import Conference

from tests.fakes import T0


async def _seed(db, conference_id, status, start=None, end=None, **extra):
    row = Conference(
        id=conference_id, title=f"Conference {conference_id}", status=status,
        start_time=start, end_time=end, **extra,
    )
    db.add(row)
    await db.commit()
    return row


# -- Create --------------------------------------------------------------------

async def test_create_conference_defaults_to_upcoming(client):
    response = await client.post("/api/v1/conferences", json={
        "title": "  Rust in Production  ",
        "start_time": (T0 + timedelta(hours=1)).isoformat(),
        "end_time": (T0 + timedelta(hours=2)).isoformat(),
    })
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Rust in Production"
    assert data["status"] == "upcoming"
    assert data["computed_status"] == "upcoming"
    assert data["ends_in"] is None
    assert data["id"]


async def test_create_accepts_legacy_timestamp_shapes(client):
    start_ms = int((T0 - timedelta(minutes=10)).timestamp() * 1000)
    end_seconds = int((T0 + timedelta(minutes=50)).timestamp())
    response = await client.post("/api/v1/conferences", json={
        "title": "Legacy",
        "start_time": start_ms,
        "end_time": {"seconds": end_seconds, "nanoseconds": 0},
    })
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "upcoming"
    assert data["computed_status"] == "live"
    assert data["ends_in"]["display"] == "00:50:00"


async def test_create_rejects_inverted_window(client):
    response = await client.post("/api/v1/conferences", json={
        "title": "Backwards",
        "start_time": (T0 + timedelta(hours=2)).isoformat(),
        "end_time": (T0 + timedelta(hours=1)).isoformat(),
    })
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_SCHEDULE"


async def test_create_rejects_unparseable_timestamp(client):
    response = await client.post("/api/v1/conferences", json={
        "title": "Bad time", "start_time": "next tuesday",
    })
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert any("start_time" in d["field"] for d in error["details"])


async def test_create_rejects_blank_title(client):
    response = await client.post("/api/v1/conferences", json={"title": "   "})
    assert response.status_code == 400


# -- Read ----------------------------------------------------------------------

async def test_get_reports_stale_stored_status_and_computed_truth(client, test_db):
    await _seed(
        test_db, "c1", "upcoming",
        T0 - timedelta(minutes=5), T0 + timedelta(hours=1, minutes=2, seconds=3),
    )
    response = await client.get("/api/v1/conferences/c1")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "upcoming"
    assert data["computed_status"] == "live"
    assert data["ends_in"] == {
        "hours": 1, "minutes": 2, "seconds": 3, "display": "01:02:03",
    }


async def test_get_without_window_falls_back_to_stored_status(client, test_db):
    await _seed(test_db, "manual", "live")
    data = (await client.get("/api/v1/conferences/manual")).json()
    assert data["computed_status"] == "live"
    assert data["ends_in"] is None


async def test_get_unknown_conference_is_404(client):
    response = await client.get("/api/v1/conferences/nope")
    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "RESOURCE_NOT_FOUND"
    assert error["context"]["conference_id"] == "nope"


# -- Catalog -------------------------------------------------------------------

async def test_catalog_buckets_by_time_not_stored_label(client, test_db):
    await _seed(test_db, "stale-live", "upcoming",
                T0 - timedelta(minutes=5), T0 + timedelta(minutes=30))
    await _seed(test_db, "later", "upcoming",
                T0 + timedelta(days=2), T0 + timedelta(days=2, hours=1))
    await _seed(test_db, "sooner", "upcoming",
                T0 + timedelta(days=1), T0 + timedelta(days=1, hours=1))
    await _seed(test_db, "done", "live",
                T0 - timedelta(hours=3), T0 - timedelta(hours=2))

    response = await client.get("/api/v1/conferences/catalog")
    assert response.status_code == 200
    data = response.json()
    assert [c["id"] for c in data["live"]] == ["stale-live"]
    assert [c["id"] for c in data["upcoming"]] == ["sooner", "later"]
    assert [c["id"] for c in data["past"]] == ["done"]
    assert data["past"][0]["status"] == "live"


async def test_catalog_past_limit(client, test_db):
    for i in range(3):
        await _seed(test_db, f"p{i}", "ended",
                    T0 - timedelta(days=i + 1, hours=1), T0 - timedelta(days=i + 1))
    data = (await client.get("/api/v1/conferences/catalog?past_limit=2")).json()
    assert [c["id"] for c in data["past"]] == ["p0", "p1"]


async def test_catalog_on_empty_store(client):
    data = (await client.get("/api/v1/conferences/catalog")).json()
    assert data == {"live": [], "upcoming": [], "past": []}


# -- Organizer overrides -------------------------------------------------------

async def test_start_goes_live_early(client, test_db):
    await _seed(test_db, "c1", "upcoming",
                T0 + timedelta(minutes=10), T0 + timedelta(hours=1))
    response = await client.post("/api/v1/conferences/c1/start")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "live"
    assert data["computed_status"] == "live"
    assert data["ends_in"]["display"] == "01:00:00"

    again = (await client.get("/api/v1/conferences/c1")).json()
    assert again["status"] == "live"
    assert again["computed_status"] == "live"

    catalog = (await client.get("/api/v1/conferences/catalog")).json()
    assert [c["id"] for c in catalog["live"]] == ["c1"]
    assert catalog["upcoming"] == []


async def test_end_pulls_end_time_in(client, test_db, clock):
    await _seed(test_db, "c1", "live",
                T0 - timedelta(minutes=30), T0 + timedelta(minutes=30))
    response = await client.post("/api/v1/conferences/c1/end")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ended"
    assert data["computed_status"] == "ended"
    assert data["ends_in"] is None

    clock.advance(minutes=1)
    stored = (await client.get("/api/v1/conferences/c1")).json()
    assert stored["status"] == "ended"
    assert stored["computed_status"] == "ended"


async def test_ended_conference_leaves_live_bucket_immediately(client, test_db):
    await _seed(test_db, "c1", "live",
                T0 - timedelta(minutes=30), T0 + timedelta(minutes=30))
    await client.post("/api/v1/conferences/c1/end")

    catalog = (await client.get("/api/v1/conferences/catalog")).json()
    assert catalog["live"] == []
    assert [c["id"] for c in catalog["past"]] == ["c1"]

    countdown = await client.get("/api/v1/conferences/c1/countdown")
    assert countdown.status_code == 409


async def test_start_on_ended_is_409(client, test_db):
    await _seed(test_db, "c1", "ended")
    response = await client.post("/api/v1/conferences/c1/start")
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "INVALID_TRANSITION"


async def test_end_unknown_conference_is_404(client):
    response = await client.post("/api/v1/conferences/missing/end")
    assert response.status_code == 404
