from fastapi.testclient import TestClient

from app.main import app
from app.models.profile import Institution
from app.services.profile_service import check_completion

client = TestClient(app)


def _auth_headers(user_id: str = "pharmacist-1", **profile) -> dict:
    resp = client.post("/auth/token", json={"user_id": user_id, **profile})
    assert resp.status_code == 200, f"token request failed: {resp.status_code} {resp.text}"
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def _seed_institutions(db) -> dict:
    rows = [Institution(name="Other"), Institution(name="General Hospital")]
    db.add_all(rows)
    db.commit()
    return {row.name: row.id for row in rows}


def _payload(**overrides) -> dict:
    payload = {
        "name": "Dana Reyes",
        "email": "dana@example.org",
        "title": "Pharmacist",
        "experience_level": "6-10 years",
        "institution": "General Hospital",
    }
    payload.update(overrides)
    return payload


def test_token_mint_seeds_the_profile():
    headers = _auth_headers(email="dana@example.org", name="Dana Reyes")

    body = client.get("/profile", headers=headers).json()
    assert body["email"] == "dana@example.org"
    assert body["name"] == "Dana Reyes"

    completion = client.get("/profile/completion", headers=headers).json()
    assert completion["is_complete"] is False
    assert completion["missing_fields"] == ["title", "experience_level", "institution_id"]


def test_update_with_known_institution(db):
    ids = _seed_institutions(db)
    headers = _auth_headers()

    resp = client.put("/profile", headers=headers, json=_payload(institution_other="  Pharmacy dept  "))
    assert resp.status_code == 200
    body = resp.json()
    assert body["institution"] == "General Hospital"
    assert body["institution_id"] == ids["General Hospital"]
    assert body["notes"] == "Pharmacy dept"
    assert body["updated_at"] is not None

    completion = client.get("/profile/completion", headers=headers).json()
    assert completion == {"is_complete": True, "missing_fields": []}


def test_update_with_other_title_and_institution(db):
    ids = _seed_institutions(db)
    headers = _auth_headers()

    resp = client.put(
        "/profile",
        headers=headers,
        json=_payload(
            title="Other, please specify",
            title_other="Stewardship Lead",
            institution="Other",
            institution_other="Rural Clinic",
        ),
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "Stewardship Lead"
    assert body["institution"] == "Rural Clinic"
    assert body["institution_id"] == ids["Other"]
    assert body["notes"] is None


def test_update_rejects_blank_required_fields():
    headers = _auth_headers()
    resp = client.put("/profile", headers=headers, json=_payload(name="   "))
    assert resp.status_code == 422
    assert "name" in resp.json()["detail"]["field_errors"]


def test_institutions_are_listed_by_name(db):
    _seed_institutions(db)
    headers = _auth_headers()

    names = [row["name"] for row in client.get("/profile/institutions", headers=headers).json()]
    assert names == ["General Hospital", "Other"]


def test_completion_without_a_profile():
    assert check_completion(None) == {
        "is_complete": False,
        "missing_fields": ["name", "email", "title", "experience_level", "institution_id"],
    }
