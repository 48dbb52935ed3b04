import pytest

from race_safety_health.errors import PersistenceError
from race_safety_health.persistence import JsonFileAdapter, MemoryAdapter, default_document
from race_safety_health.store import RecordStore


def _edited_document():
    store = RecordStore(default_document("roadMarathon"))
    store.apply_incident("H2", "Runner collision", "KM 14 pile-up")
    store.update_hazard("H3", controls_active=0.9, segment_id="SEG-20")
    store.update_control("C6", uca_count=3)
    store.set_constraint_status("S5", "warn")
    store.set_readiness_score("Health / Sanitary", "aed", 0.9)
    store.set_hazard_notes("H1", "Extra misting stations")
    store.set_role("Medical Lead")
    store.set_language("el")
    store.set_segment_filter("SEG-10")
    store.document.last_holistic = 71.25
    return store.document


def test_default_document_uses_template_and_controls() -> None:
    document = default_document("trailUltra")
    assert document.template_key == "trailUltra"
    assert [h.id for h in document.hazards] == ["H1", "H2", "H3", "H4", "H5", "H6"]
    assert [c.id for c in document.controls] == ["C1", "C2", "C3", "C4", "C5", "C6"]
    assert document.role == "Race Director"
    assert document.last_holistic is None


def test_file_round_trip(tmp_path) -> None:
    document = _edited_document()
    adapter = JsonFileAdapter(tmp_path, "raceSafetyMVP.v4")
    adapter.save(document)
    assert adapter.path.exists()
    assert adapter.load() == document


def test_memory_round_trip() -> None:
    document = _edited_document()
    adapter = MemoryAdapter()
    assert adapter.load() is None
    adapter.save(document)
    assert adapter.load() == document
    assert adapter.saves == 1


def test_missing_file_and_new_storage_key(tmp_path) -> None:
    JsonFileAdapter(tmp_path, "raceSafetyMVP.v4").save(default_document())
    assert JsonFileAdapter(tmp_path, "raceSafetyMVP.v5").load() is None
    assert JsonFileAdapter(tmp_path / "absent", "raceSafetyMVP.v4").load() is None


def test_corrupt_state_raises_persistence_error(tmp_path) -> None:
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(PersistenceError):
        JsonFileAdapter(tmp_path, "broken").load()
    with pytest.raises(PersistenceError):
        MemoryAdapter('{"template_key": "roadShort", "hazards": [{"id": "H1"}]}').load()


def test_unwritable_location_raises_persistence_error(tmp_path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    with pytest.raises(PersistenceError):
        JsonFileAdapter(blocker, "state").save(default_document())


def test_non_utf8_state_raises_persistence_error(tmp_path) -> None:
    (tmp_path / "state.json").write_bytes(b'{"template_key": "\xff\xfe"}')
    with pytest.raises(PersistenceError):
        JsonFileAdapter(tmp_path, "state").load()


def test_dangling_segment_reference_rejected_on_load() -> None:
    raw = default_document().model_dump_json().replace('"segment_id":"SEG-2"', '"segment_id":"SEG-GONE"')
    assert "SEG-GONE" in raw
    with pytest.raises(PersistenceError, match="unknown segment"):
        MemoryAdapter(raw).load()
