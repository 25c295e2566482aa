from datetime import datetime
from types import SimpleNamespace

from competency_tracker.services.competencies import (
    CATEGORY_ORDER,
    group_by_category,
    ordered_categories,
)
from competency_tracker.services.seeding import COMPETENCY_CATALOG

from conftest import board_items


def catalog_rows(entries=COMPETENCY_CATALOG):
    blank = dict(reference_code=None, what=None, looks_like=None, critical=None)
    return [SimpleNamespace(**{**blank, **entry}) for entry in entries]


def progress_row(competency_id, **fields):
    base = dict(
        id=f"ada@example.com_{competency_id}",
        apprentice_email="ada@example.com",
        competency_id=competency_id,
        rating=None,
        self_rating=None,
        mentor_name=None,
        comments=None,
        date_validated=None,
        viewed_date=None,
        handoff_date=None,
        signature=None,
    )
    base.update(fields)
    return SimpleNamespace(**base)


def test_catalog_is_unique_and_complete():
    ids = [entry["id"] for entry in COMPETENCY_CATALOG]
    assert len(ids) == 56
    assert len(set(ids)) == len(ids)
    assert {entry["category"] for entry in COMPETENCY_CATALOG} == set(CATEGORY_ORDER)


def test_group_without_progress_is_all_pending():
    grouped = group_by_category(catalog_rows(), [])
    assert list(grouped) == CATEGORY_ORDER
    items = [item for items in grouped.values() for item in items]
    assert len(items) == 56
    assert {item.status for item in items} == {"pending"}
    assert all(item.progress is None for item in items)


def test_group_attaches_progress_and_hides_signature():
    rows = [progress_row("G01", viewed_date=datetime(2024, 3, 1), signature="data:image/png;base64,AA")]
    grouped = group_by_category(catalog_rows(), rows)
    g01 = grouped["General Competencies"][0]
    assert g01.id == "G01"
    assert g01.status == "viewed"
    dumped = g01.progress.model_dump(by_alias=True)
    assert dumped["hasSignature"] is True
    assert "signature" not in dumped


def test_group_is_pure():
    competencies = catalog_rows()
    rows = [progress_row("QC01", self_rating=2)]
    first = group_by_category(competencies, rows)
    second = group_by_category(competencies, rows)
    assert first == second
    assert len(rows) == 1 and rows[0].self_rating == 2


def test_unknown_categories_follow_known_ones():
    entries = [
        {"id": "X01", "category": "Zeta Extras", "text": "z"},
        {"id": "G01", "category": "General Competencies", "text": "g"},
        {"id": "Y01", "category": "Alpha Extras", "text": "a"},
    ]
    grouped = group_by_category(catalog_rows(entries), [])
    assert list(grouped) == ["General Competencies", "Zeta Extras", "Alpha Extras"]


def test_ordered_categories_deduplicates():
    assert ordered_categories(["Band Saws", "Quality Control", "Band Saws"]) == ["Quality Control", "Band Saws"]


def test_board_requires_login(client):
    resp = client.get("/api/competencies")
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "Authentication required"}


def test_board_lists_seeded_catalog(client, apprentice):
    resp = client.get("/api/competencies")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert list(body["competencies"]) == CATEGORY_ORDER
    items = board_items(body)
    assert len(items) == 56
    assert all(item["status"] == "pending" for item in items)
    assert {"referenceCode", "looksLike", "critical", "what"} <= set(items[0])


def test_catalog_list_has_no_progress(client, apprentice):
    resp = client.get("/api/competencies/list")
    assert resp.status_code == 200
    items = board_items(resp.json())
    assert len(items) == 56
    assert set(items[0]) == {"id", "text", "referenceCode"}
