import os, json, time, tempfile, pytest

_TMP = tempfile.mkdtemp(prefix="finagent-tests-")
os.environ["OPENAI_API_KEY"] = ""
os.environ["DB_URL"] = f"sqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["DATA_DIR"] = _TMP
os.environ["EXPORT_DIR"] = os.path.join(_TMP, "exports")
os.environ["LOG_DIR"] = os.path.join(_TMP, "logs")
os.environ["SECTORS_PATH"] = os.path.join(_TMP, "sectors.json")

with open(os.environ["SECTORS_PATH"], "w", encoding="utf-8") as f:
    json.dump({"sectors": [
        {"Sector Name": "Food Truck", "Investor Persona Fit": "Chef entrepreneur wanting mobile catering and events",
         "Year 1 Annual Revenue (Est.)": "200000", "Gross Margin Target (%)": "65",
         "Total Startup Cost (Est. Min)": "90000", "Year 1 ROI % (Est.)": "~22", "Index Score": "69",
         "Dimension: ROI Potential (1-10)": "7", "Dimension: Scalability (1-10)": "4",
         "Dimension: Compliance Simplicity (1-10)": "5", "Dimension: Market Resilience (1-10)": "6",
         "Dimension: Execution Simplicity (1-10)": "7", "Cost: Equipment/Assets": "$70k truck",
         "Cost: Legal/Licenses/Permits": "$6k permits", "Cost: Initial Stock/Inventory": "$4k ingredients",
         "Top Risk Scenario": "Weather cuts selling days", "Mitigating Control": "Book private events"},
        {"Sector Name": "B2B SaaS", "Investor Persona Fit": "Technical founder building subscription software",
         "Year 1 Annual Revenue (Est.)": "300000", "Gross Margin Target (%)": "80",
         "Total Startup Cost (Est. Min)": "150000", "Year 1 ROI % (Est.)": "~-20", "Index Score": "78",
         "Dimension: ROI Potential (1-10)": "9", "Dimension: Scalability (1-10)": "10",
         "Dimension: Compliance Simplicity (1-10)": "7", "Dimension: Market Resilience (1-10)": "6",
         "Dimension: Execution Simplicity (1-10)": "4", "Cost: Equipment/Assets": "$10k laptops",
         "Cost: Legal/Licenses/Permits": "$8k contracts", "Cost: Initial Stock/Inventory": "$0",
         "Top Risk Scenario": "Churn", "Mitigating Control": "Annual contracts"},
    ]}, f)

from fastapi.testclient import TestClient
from finagent.main import app

SUBMISSION = {
    "businessIdea": "A mobile taco truck serving office parks at lunch and breweries at night",
    "selectedSector": "Food Truck",
    "startupCost": 90000,
    "monthlyRevenue": 18000,
    "grossMargin": 65,
    "operatingExpenses": 6000,
}

@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c

@pytest.fixture
def submission():
    return dict(SUBMISSION)

def wait_for_status(client, model_id, statuses=("completed", "failed"), timeout=20.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        body = client.get(f"/api/models/{model_id}").json()
        if body["status"] in statuses:
            return body
        time.sleep(0.05)
    raise AssertionError(f"model {model_id} never reached {statuses}")

@pytest.fixture
def completed_model(client, submission):
    r = client.post("/api/generate-model", json=submission)
    return wait_for_status(client, r.json()["id"])

@pytest.fixture
def wait():
    return wait_for_status
