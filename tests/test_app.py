import pytest

from app import app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


RESTOCK_ALTERNATIVES = [
    {"name": "Oli Mesin", "criteria": [5, 20, 100, 2, 3, 45000, 4, 5]},
    {"name": "Kampas Rem", "criteria": [4, 10, 40, 6, 4, 80000, 5, 3]},
    {"name": "Busi", "criteria": [2, 50, 50, 4, 1, 25000, 3, 4]},
    {"name": "Aki", "criteria": [3, 2, 8, 3, 5, 650000, 5, 5]},
]


class TestTopsisEndpoint:

    PAYLOAD = {
        "alternatives": [
            {"name": "B", "criteria": [2, 4]},
            {"name": "A", "criteria": [4, 2]},
        ],
        "weights": [0.5, 0.5],
        "criteriaType": ["benefit", "cost"],
    }

    @pytest.mark.parametrize("url", ["/api/topsis", "/topsis"])
    def test_ranks_worked_example(self, client, url):
        resp = client.post(url, json=self.PAYLOAD)
        assert resp.status_code == 200
        body = resp.get_json()
        assert [r["name"] for r in body] == ["A", "B"]
        assert body[0]["score"] == pytest.approx(1.0)
        assert body[1]["score"] == pytest.approx(0.0)

    def test_missing_alternatives(self, client):
        resp = client.post("/api/topsis", json={"weights": [1]})
        assert resp.status_code == 400
        assert "error" in resp.get_json()

    def test_not_json(self, client):
        resp = client.post("/api/topsis", data="bukan json", content_type="text/plain")
        assert resp.status_code == 400

    def test_unknown_criteria_type(self, client):
        payload = dict(self.PAYLOAD, criteriaType=["benefit", "murah"])
        resp = client.post("/api/topsis", json=payload)
        assert resp.status_code == 400
        assert "murah" in resp.get_json()["error"]

    def test_weight_length_mismatch(self, client):
        payload = dict(self.PAYLOAD, weights=[1.0])
        resp = client.post("/api/topsis", json=payload)
        assert resp.status_code == 400

    @pytest.mark.parametrize("overrides", [
        {"alternatives": [{"name": "A", "criteria": ["4", "2"]}, {"name": "B", "criteria": [2, 4]}]},
        {"alternatives": [{"name": "A", "criteria": [4, 2]}, {"name": "B", "criteria": [2, True]}]},
        {"weights": ["0.5", "0.5"]},
    ])
    def test_strings_and_bools_are_not_coerced(self, client, overrides):
        resp = client.post("/api/topsis", json=dict(self.PAYLOAD, **overrides))
        assert resp.status_code == 400
        assert "angka" in resp.get_json()["error"]

    def test_huge_weights(self, client):
        resp = client.post("/api/topsis", json=dict(self.PAYLOAD, weights=[1e200, 1e200]))
        assert resp.status_code == 200
        body = resp.get_json()
        assert [r["name"] for r in body] == ["A", "B"]
        assert [r["score"] for r in body] == [1.0, 0.0]

    def test_internal_failure_returns_500(self, client, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("rusak")

        monkeypatch.setattr("app.rank", boom)
        resp = client.post("/api/topsis", json=self.PAYLOAD)
        assert resp.status_code == 500
        assert resp.get_json()["error"] == "Internal Server Error"


class TestRestockEndpoint:

    def test_envelope_and_ordering(self, client):
        resp = client.post("/api/restock", json={"alternatives": RESTOCK_ALTERNATIVES})
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["status"] == "success"
        data = body["data"]
        assert len(data) == 4
        scores = [item["score"] for item in data]
        assert scores == sorted(scores, reverse=True)
        assert all(0.0 <= s <= 1.0 for s in scores)
        assert data[0]["rank"] == 1

    def test_scores_rounded_to_four_decimals(self, client):
        resp = client.post("/api/restock", json={"alternatives": RESTOCK_ALTERNATIVES})
        for item in resp.get_json()["data"]:
            assert round(item["score"], 4) == item["score"]

    def test_derived_criteria_follow_their_alternative(self, client):
        resp = client.post("/api/restock", json={"alternatives": RESTOCK_ALTERNATIVES})
        by_name = {item["name"]: item["criteria"] for item in resp.get_json()["data"]}
        assert by_name["Oli Mesin"]["supply_gap"] == 80.0
        assert by_name["Oli Mesin"]["delivery"] == 100.0
        assert by_name["Kampas Rem"]["delivery"] == 0.0
        assert by_name["Aki"]["supply_gap"] == 75.0

    def test_raw_delivery_time(self, client):
        resp = client.post("/api/restock", json={
            "alternatives": RESTOCK_ALTERNATIVES,
            "delivery_percentage": False,
        })
        by_name = {item["name"]: item["criteria"] for item in resp.get_json()["data"]}
        assert by_name["Kampas Rem"]["delivery"] == 6.0

    def test_blank_name_is_rejected(self, client):
        alts = RESTOCK_ALTERNATIVES[:1] + [{"name": " ", "criteria": [0] * 8}]
        resp = client.post("/api/restock", json={"alternatives": alts})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Semua alternatif harus memiliki nama."

    def test_wrong_arity_is_rejected(self, client):
        resp = client.post("/api/restock", json={"alternatives": [{"name": "X", "criteria": [1, 2, 3]}]})
        assert resp.status_code == 400

    def test_bad_delivery_flag(self, client):
        resp = client.post("/api/restock", json={
            "alternatives": RESTOCK_ALTERNATIVES,
            "delivery_percentage": "ya",
        })
        assert resp.status_code == 400


def test_criteria_endpoint(client):
    resp = client.get("/api/criteria")
    assert resp.status_code == 200
    body = resp.get_json()
    assert [c["type"] for c in body["criteria"]] == [
        "benefit", "benefit", "cost", "cost", "cost", "benefit", "benefit"
    ]
    form = body["default_form"]
    assert len(form) == 4
    assert all(alt["name"] == "" and len(alt["criteria"]) == 8 for alt in form)
