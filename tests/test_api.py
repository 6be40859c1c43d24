"""
API tests using FastAPI's TestClient.

The client is entered as a context manager so the lifespan runs and the
bundled framework packs are loaded.
"""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api import main
from api.main import app
from carecheck.models import Note

from tests.conftest import make_client


DOSSIER = {
    "client": {
        "client_id": "C-001",
        "name": "Mevr. De Vries",
        "dob": "1938-04-12",
        "wlz_profile": "VV7",
    },
    "notes": [
        {
            "id": "n-1",
            "date": "2026-03-05",
            "author": "Verzorgende A. Bakker",
            "section": "Rapportage",
            "text": "Meer hulp nodig bij wassen en aankleden, ADL toegenomen",
        },
        {
            "id": "n-2",
            "date": "2026-03-01",
            "author": "Dr. Jansen, specialist ouderengeneeskunde",
            "section": "Zorgplan",
            "text": "Doel: structureel toezicht in de nacht vanwege onrust",
        },
    ],
    "measures": [
        {"id": "m-1", "date": "2026-02-20", "type": "Katz-ADL", "score": "F"},
    ],
    "incidents": [
        {
            "id": "i-1",
            "date": "2026-02-10",
            "type": "Val",
            "severity": "Matig",
            "description": "Val in de nacht naast het bed",
        },
    ],
}

AS_OF = "2026-03-15"


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


class TestHealth:

    def test_health(self, client) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["healthy"] is True
        assert data["frameworks_loaded"] == 4
        assert data["rules_registered"] == 13


class TestFrameworkEndpoints:

    def test_list_versions(self, client) -> None:
        response = client.get("/frameworks/meerzorg", params={"on": AS_OF})
        assert response.status_code == 200
        data = response.json()
        assert [v["version"] for v in data["versions"]] == ["2025", "2026"]
        assert data["current_version"] == "2026"
        assert [v["rule_count"] for v in data["versions"]] == [9, 10]

    def test_unknown_framework_type(self, client) -> None:
        response = client.get("/frameworks/wmo")
        assert response.status_code == 404

    def test_active_version_with_transition(self, client) -> None:
        response = client.get(
            "/frameworks/meerzorg/active",
            params={"on": AS_OF, "current_version": "2025"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["version"] == "2026"
        assert data["transition"]["to_version"] == "2026"
        assert data["transition"]["migration_required"] is True

    def test_active_version_without_transition(self, client) -> None:
        response = client.get(
            "/frameworks/meerzorg/active",
            params={"on": "2025-06-01", "current_version": "2025"},
        )
        data = response.json()
        assert data["version"] == "2025"
        assert data["transition"] is None

    def test_version_config(self, client) -> None:
        data = client.get("/frameworks/meerzorg/2026").json()
        assert data["limits"]["max_day_care_hours"] == 16
        assert data["required_fields"] == ["duurzaamheid_onderbouwing"]
        assert data["effective_from"] == "2026-01-01"
        assert data["is_default"] is False

    def test_unknown_version_config_uses_defaults(self, client) -> None:
        data = client.get("/frameworks/meerzorg/2031").json()
        assert data["is_default"] is True
        assert data["effective_from"] is None

    def test_validate(self, client) -> None:
        response = client.post(
            "/frameworks/meerzorg/2026/validate",
            json={"form_data": {"dagzorg_uren": "20"}, "as_of": AS_OF},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is False
        day_care = [i for i in data["issues"] if i.get("field") == "dagzorg_uren"]
        assert [i["type"] for i in day_care] == ["limit_exceeded"]

    def test_validate_non_mapping(self, client) -> None:
        response = client.post(
            "/frameworks/meerzorg/2026/validate",
            json={"form_data": "dagzorg_uren=20"},
        )
        assert response.status_code == 200
        assert response.json()["valid"] is False

    def test_migrate(self, client) -> None:
        response = client.post(
            "/frameworks/meerzorg/migrate",
            json={"form_data": {}, "from_version": "2025", "to_version": "2026", "as_of": AS_OF},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["migrated_fields"]["duurzaamheid_onderbouwing"] == ""


class TestCheckEndpoint:

    def test_run_checks(self, client) -> None:
        response = client.post("/checks", json={
            "dossier": DOSSIER,
            "framework_type": "meerzorg",
            "version": "2026",
            "form_data": {"dagzorg_uren": 12, "nachtzorg_uren": 4},
            "application_id": "APP-9",
            "as_of": AS_OF,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["version"] == "2026"
        assert len(data["results"]) == 10
        assert data["summary"]["total"] == 10
        assert all(r["application_id"] == "APP-9" for r in data["results"])

    def test_version_defaults_to_active(self, client) -> None:
        response = client.post("/checks", json={
            "dossier": DOSSIER,
            "framework_type": "meerzorg",
            "as_of": "2025-06-01",
        })
        data = response.json()
        assert data["version"] == "2025"
        assert len(data["results"]) == 9

    def test_unknown_version(self, client) -> None:
        response = client.post("/checks", json={
            "dossier": DOSSIER,
            "framework_type": "meerzorg",
            "version": "2031",
        })
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CC_FRAMEWORK_NOT_FOUND"

    def test_invalid_request(self, client) -> None:
        response = client.post("/checks", json={"framework_type": "meerzorg"})
        assert response.status_code == 422


class TestEvidenceEndpoints:

    def test_link(self, client) -> None:
        response = client.post("/evidence/link", json={
            "dossier": DOSSIER,
            "field_name": "adl_score",
            "value": "F",
            "as_of": AS_OF,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["target_path"] == "meerzorg.adl_score"
        assert data["links"][0]["source_type"] == "measure"
        assert data["quality"]["sufficient"] is True

    def test_chain(self, client) -> None:
        response = client.post("/evidence/chain", json={
            "dossier": DOSSIER,
            "field_name": "nachtzorg_uren",
            "keywords": ["nacht", "toezicht", "onrust"],
            "claim": "Nachtelijk toezicht nodig",
            "as_of": AS_OF,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["chain"]["target"] == "meerzorg.nachtzorg_uren"
        assert data["chain"]["evidence"]
        assert data["chain"]["evidence"][0]["level"] == 1
        assert len(data["fingerprint"]) == 16

    def test_chain_without_evidence(self, client) -> None:
        response = client.post("/evidence/chain", json={
            "dossier": {"client": {"client_id": "C-002"}},
            "field_name": "adl_score",
            "claim": "ADL score F",
        })
        data = response.json()
        assert data["chain"]["gaps"] == ["Geen ondersteunend bewijs gevonden"]
        assert data["chain"]["overall_confidence"] == 0.0


class TestCriteriaEndpoint:

    def _request(self, **overrides):
        body = {
            "client_id": "C-001",
            "period_from": "2026-01-01",
            "period_to": AS_OF,
            "dossier": DOSSIER,
            "as_of": AS_OF,
        }
        body.update(overrides)
        return body

    def test_evaluate_inline_dossier(self, client) -> None:
        response = client.post("/criteria/evaluate", json=self._request())
        assert response.status_code == 200
        data = response.json()
        assert data["period"] == "2026-01-01 to 2026-03-15"
        assert len(data["criteria"]) == 8
        adl = data["criteria"][0]
        assert adl["id"] == "ADL"
        assert adl["source"] == "heuristic"
        assert adl["status"] == "toegenomen_behoefte"

    def test_selected_criteria(self, client) -> None:
        response = client.post("/criteria/evaluate", json=self._request(criteria=["SOCIAAL"]))
        data = response.json()
        assert [c["id"] for c in data["criteria"]] == ["SOCIAAL"]
        assert data["criteria"][0]["status"] == "onvoldoende_bewijs"

    def test_max_evidence(self, client) -> None:
        response = client.post("/criteria/evaluate", json=self._request(criteria=["ADL"], max_evidence=1))
        assert len(response.json()["criteria"][0]["evidence"]) == 1

    def test_reversed_period(self, client) -> None:
        response = client.post(
            "/criteria/evaluate",
            json=self._request(period_from=AS_OF, period_to="2026-01-01"),
        )
        assert response.status_code == 400

    def test_unknown_criterion(self, client) -> None:
        response = client.post("/criteria/evaluate", json=self._request(criteria=["VLIEGEN"]))
        assert response.status_code == 404

    def test_dossier_of_other_client(self, client) -> None:
        response = client.post("/criteria/evaluate", json=self._request(client_id="C-999"))
        assert response.status_code == 400

    def test_stored_dossier_unknown_client(self, client) -> None:
        response = client.post("/criteria/evaluate", json=self._request(client_id="C-404", dossier=None))
        assert response.status_code == 404

    def test_stored_dossier(self, client) -> None:
        main.dossier_store.add_client(make_client("C-777"))
        main.dossier_store.add_note(Note(
            id="n-77",
            client_id="C-777",
            date="2026-03-10",
            text="Cliënt is somber en angstig, stemming wisselend",
        ))
        response = client.post(
            "/criteria/evaluate",
            json=self._request(client_id="C-777", dossier=None, criteria=["PSYCHISCH"]),
        )
        assert response.status_code == 200
        criterion = response.json()["criteria"][0]
        assert criterion["evidence"][0]["source_id"] == "n-77"
