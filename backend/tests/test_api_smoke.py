import pytest

GOALS_2025 = {"running": 400, "cycling": 1000, "swimming": 20000, "year": 2025}


def _set_goals(client, headers=None):
    r = client.put("/goals/", json=GOALS_2025, headers=headers or {})
    assert r.status_code == 200, r.text
    return r.json()


def test_root_ok(client):
    r = client.get("/")
    assert r.status_code == 200
    data = r.json()
    assert "message" in data


def test_set_goals_and_list_with_progress(client):
    goals = _set_goals(client)
    assert {g["type"] for g in goals} == {"running", "cycling", "swimming"}

    payload = {"goal_type": "running", "distance": 12.5, "date": "2025-02-01T07:00:00.000Z", "notes": "tempo"}
    cr = client.post("/activities/", json=payload)
    assert cr.status_code == 200, cr.text
    assert cr.json()["source"] == "manual"

    # Last year's activity does not count
    client.post("/activities/", json={"goal_type": "running", "distance": 30, "date": "2024-12-31"})

    lr = client.get("/goals/", params={"year": 2025})
    assert lr.status_code == 200
    running = next(g for g in lr.json() if g["type"] == "running")
    assert running["yearly_target"] == 400
    assert running["current_progress"] == pytest.approx(12.5)


def test_goal_upsert_is_keyed_by_type_and_year(client):
    _set_goals(client)
    r = client.put("/goals/running", json={"yearly_target": 500, "year": 2025})
    assert r.status_code == 200, r.text
    goals = client.get("/goals/", params={"year": 2025}).json()
    assert len(goals) == 3
    assert next(g for g in goals if g["type"] == "running")["yearly_target"] == 500


def test_goal_target_must_be_positive(client):
    r = client.put("/goals/", json={"running": 0, "cycling": 100, "swimming": 1000})
    assert r.status_code == 422


def test_goal_status(client):
    assert client.get("/goals/status").json() == {"has_goals": False}
    _set_goals(client)
    assert client.get("/goals/status").json() == {"has_goals": True}


def test_progress_and_most_urgent(client):
    _set_goals(client)
    client.post("/activities/", json={"goal_type": "running", "distance": 50, "date": "2025-03-01"})
    client.post("/activities/", json={"goal_type": "cycling", "distance": 300, "date": "2025-03-02"})
    client.post("/activities/", json={"goal_type": "swimming", "distance": 6000, "date": "2025-03-03"})

    r = client.get("/goals/running/progress")
    assert r.status_code == 200, r.text
    stats = r.json()
    assert stats["expected_progress"] == pytest.approx(109.89, abs=0.01)
    assert stats["percent_behind"] == pytest.approx(-14.97, abs=0.01)

    all_stats = client.get("/goals/progress").json()
    assert len(all_stats["stats"]) == 3
    assert all_stats["most_urgent"] == "running"


def test_progress_404_without_goal(client):
    assert client.get("/goals/cycling/progress").status_code == 404
    assert client.get("/goals/cycling/schedule").status_code == 404


def test_schedule_has_twelve_months(client):
    _set_goals(client)
    points = client.get("/goals/running/schedule").json()
    assert len(points) == 12
    assert points[3]["actual"] == 0  # April is the current month
    assert points[4]["actual"] is None


def test_swim_distance_minimum(client):
    ok = client.post("/activities/", json={"goal_type": "swimming", "distance": 10, "date": "2025-02-01"})
    assert ok.status_code == 200, ok.text
    bad = client.post("/activities/", json={"goal_type": "swimming", "distance": 9, "date": "2025-02-01"})
    assert bad.status_code == 422


def test_import_endpoint_upserts_by_strava_id(client):
    batch = [{"id": "strava-555", "goal_type": "cycling", "distance": 20, "date": "2025-03-04"}]
    r1 = client.post("/activities/import", json=batch)
    assert r1.status_code == 200, r1.text
    assert r1.json()["imported"] == 1

    batch[0]["distance"] = 25
    r2 = client.post("/activities/import", json=batch)
    assert r2.json()["total_activities"] == 1

    acts = client.get("/activities/", params={"goal_type": "cycling"}).json()
    assert len(acts) == 1
    assert acts[0]["distance"] == 25
    assert acts[0]["strava_id"] == "555"


def test_import_reports_item_errors(client):
    batch = [
        {"id": "a", "goal_type": "running", "distance": 5, "date": "2025-03-04"},
        {"id": "b", "goal_type": "swimming", "distance": 5, "date": "2025-03-04"},
    ]
    data = client.post("/activities/import", json=batch).json()
    assert data["imported"] == 1
    assert data["errors"][0]["activity"] == "b"


def test_users_are_isolated(client):
    client.post("/activities/", json={"goal_type": "running", "distance": 5, "date": "2025-03-04"}, headers={"X-User-Id": "alice"})
    assert client.get("/activities/", headers={"X-User-Id": "bob"}).json() == []
    assert len(client.get("/activities/", headers={"X-User-Id": "alice"}).json()) == 1


def test_strava_not_connected(client):
    assert client.get("/strava/status").json()["connected"] is False
    r = client.post("/strava/sync_import")
    assert r.status_code == 401
    assert r.json()["detail"] == "Not connected to Strava"
    assert client.get("/strava/athlete").json() is None


def test_strava_callback_links_account(client, fake_strava):
    r = client.get("/strava/callback", params={"code": "abc"})
    assert r.status_code == 200, r.text
    assert r.json()["connected"] is True

    status = client.get("/strava/status").json()
    assert status["connected"] is True
    assert status["athlete_id"] == "42"


def test_strava_callback_denied(client):
    r = client.get("/strava/callback", params={"error": "access_denied"})
    assert r.status_code == 400


def test_strava_sync_import_flow(client, fake_strava):
    client.get("/strava/callback", params={"code": "abc"})
    fake_strava.pages = [
        [
            {"id": 555, "type": "Ride", "distance": 20000, "start_date_local": "2025-03-04T07:15:00Z", "name": "Ride"},
            {"id": 556, "type": "Yoga", "distance": 0, "start_date_local": "2025-03-04T09:00:00Z", "name": "Yoga"},
        ]
    ]
    preview = client.post("/strava/sync").json()
    assert preview["count"] == 1
    assert preview["activities"][0]["id"] == "strava-555"

    r = client.post("/strava/sync_import", json={"after": 1735689600})
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["synced"] == 1
    assert data["imported"] == 1
    assert data["total_activities"] == 1
    assert client.get("/strava/status").json()["last_synced_at"] is not None


def test_strava_refresh_failure_forces_reconnect(client, fake_strava):
    fake_strava.token_payload["expires_at"] = 0  # already expired when stored
    client.get("/strava/callback", params={"code": "abc"})
    fake_strava.token_status = 401

    r = client.post("/strava/sync_import")
    assert r.status_code == 401
    assert "reconnect" in r.json()["detail"]
    assert client.get("/strava/status").json()["connected"] is False


def test_strava_outage_is_retryable(client, fake_strava):
    client.get("/strava/callback", params={"code": "abc"})
    fake_strava.list_status = 503
    assert client.post("/strava/sync_import").status_code == 503
    fake_strava.list_status = 400
    assert client.post("/strava/sync_import").status_code == 502


def test_disconnect_and_wipe(client):
    _set_goals(client)
    client.get("/strava/callback", params={"code": "abc"})
    client.post("/activities/", json={"goal_type": "running", "distance": 5, "date": "2025-03-04"})

    assert client.delete("/strava/connection").json() == {"success": True}
    assert client.get("/strava/status").json()["connected"] is False

    deleted = client.delete("/account/data").json()["deleted"]
    assert deleted["goals"] == 3
    assert deleted["activities"] == 1
    assert client.get("/goals/", params={"year": 2025}).json() == []


def _post_raw(client, path, body):
    # NaN/Infinity are not valid JSON for httpx's encoder, so send the text as-is
    return client.post(path, content=body, headers={"Content-Type": "application/json"})


def test_non_finite_activity_distance_is_422(client):
    r = _post_raw(client, "/activities/", '{"goal_type": "running", "distance": NaN, "date": "2025-02-01"}')
    assert r.status_code == 422
    assert r.json()["detail"][0]["loc"] == ["body", "distance"]

    r = _post_raw(
        client,
        "/activities/import",
        '[{"id": "strava-1", "goal_type": "running", "distance": Infinity, "date": "2025-02-01"}]',
    )
    assert r.status_code == 422
    assert client.get("/activities/").json() == []


def test_non_finite_goal_target_is_422(client):
    r = client.put(
        "/goals/running",
        content='{"yearly_target": Infinity}',
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 422
    assert client.get("/goals/status").json() == {"has_goals": False}


def test_activity_year_filter_is_bounded(client):
    assert client.get("/activities/", params={"year": 0}).status_code == 422
    assert client.get("/activities/", params={"year": 2025}).status_code == 200
