def _make_model(client, submission, wait):
    mid = client.post("/api/generate-model", json=submission).json()["id"]
    wait(client, mid)
    return mid

def test_scenario_crud(client, submission, wait):
    mid = _make_model(client, submission, wait)
    r = client.post(f"/api/models/{mid}/scenarios",
                    json={"name": "Conservative", "monthlyRevenue": 12000, "grossMargin": 55})
    assert r.status_code == 201
    sc = r.json()
    assert sc["modelId"] == mid and sc["name"] == "Conservative"
    assert sc["startupCost"] is None

    r = client.put(f"/api/scenarios/{sc['id']}", json={"description": "rainy season", "grossMargin": 50})
    assert r.status_code == 200
    updated = r.json()
    assert updated["description"] == "rainy season"
    assert updated["grossMargin"] == 50
    assert updated["monthlyRevenue"] == 12000
    assert updated["name"] == "Conservative"

    listed = client.get(f"/api/models/{mid}/scenarios").json()
    assert [s["id"] for s in listed] == [sc["id"]]

    assert client.delete(f"/api/scenarios/{sc['id']}").json() == {"success": True}
    assert client.get(f"/api/models/{mid}/scenarios").json() == []
    assert client.delete(f"/api/scenarios/{sc['id']}").status_code == 404

def test_scenario_margin_out_of_range_persists_nothing(client, submission, wait):
    mid = _make_model(client, submission, wait)
    for margin in (-1, 100.5, 250):
        r = client.post(f"/api/models/{mid}/scenarios", json={"name": "Bad", "grossMargin": margin})
        assert r.status_code == 400
        assert r.json()["details"][0]["loc"][-1] == "grossMargin"
    assert client.get(f"/api/models/{mid}/scenarios").json() == []

def test_scenario_requires_name(client, submission, wait):
    mid = _make_model(client, submission, wait)
    assert client.post(f"/api/models/{mid}/scenarios", json={"grossMargin": 40}).status_code == 400

def test_scenario_does_not_touch_model(client, submission, wait):
    mid = _make_model(client, submission, wait)
    before = client.get(f"/api/models/{mid}").json()
    client.post(f"/api/models/{mid}/scenarios", json={"name": "Aggressive", "startupCost": 1})
    assert client.get(f"/api/models/{mid}").json() == before

def test_scenario_not_found(client):
    assert client.put("/api/scenarios/nope", json={"name": "x"}).status_code == 404
    assert client.post("/api/models/nope/scenarios", json={"name": "x"}).status_code == 404
    assert client.get("/api/models/nope/scenarios").status_code == 404
