def test_list_sectors_loaded_from_dataset(client):
    r = client.get("/api/sectors")
    assert r.status_code == 200
    by_name = {s["sectorName"]: s for s in r.json()}
    truck = by_name["Food Truck"]
    assert truck["year1Roi"] == 22.0
    assert truck["grossMarginTarget"] == 65.0
    assert truck["indexScore"] == 69
    assert truck["isCustom"] is False
    assert by_name["B2B SaaS"]["year1Roi"] == -20.0

def test_reloading_does_not_duplicate(client):
    names = [s["sectorName"] for s in client.get("/api/sectors").json()]
    assert len(names) == len(set(names))

def test_get_sector_by_name(client):
    assert client.get("/api/sectors/Food Truck").json()["sectorName"] == "Food Truck"
    assert client.get("/api/sectors/Space Tourism").status_code == 404

def test_custom_sector_flagged(client):
    payload = {"sectorName": "Mobile Dog Grooming", "investorPersonaFit": "Pet lovers",
               "grossMarginTarget": 60, "roiPotential": 7}
    r = client.post("/api/sectors", json=payload)
    assert r.status_code == 201
    assert r.json()["isCustom"] is True
    assert client.post("/api/sectors", json=payload).status_code == 409
    assert client.post("/api/sectors", json=dict(payload, sectorName="X", grossMarginTarget=120)).status_code == 400

def test_recommend_offline_ranks_by_overlap(client):
    r = client.post("/api/sectors/recommend",
                    json={"businessIdea": "subscription software for small accounting firms"})
    assert r.status_code == 200
    body = r.json()
    assert body["recommendedSectors"][0] == "B2B SaaS"
    assert body["reasoning"]
