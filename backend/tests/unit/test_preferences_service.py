"""Unit tests for the JSON-file-backed PreferencesService."""

import json

import pytest

from hostpanel.application.services import PreferencesService
from hostpanel.domain.exceptions import EntityNotFoundError, ValidationError


@pytest.fixture
def prefs_file(tmp_path):
    return tmp_path / "data" / "preferences.json"


@pytest.fixture
def service(prefs_file) -> PreferencesService:
    return PreferencesService(prefs_file)


def test_defaults_without_file(service: PreferencesService):
    prefs = service.get_all()
    assert set(prefs) == {"system", "user", "display"}
    assert prefs["system"]["timezone"] == "UTC"
    assert prefs["display"]["items_per_page"] == 25


def test_update_persists_only_overrides(service: PreferencesService, prefs_file):
    section = service.update_section("system", {"timezone": "Europe/Brussels", "maintenance_mode": True})

    assert section["timezone"] == "Europe/Brussels"
    assert section["server_name"] == "web-server-01"
    assert json.loads(prefs_file.read_text()) == {
        "system": {"timezone": "Europe/Brussels", "maintenance_mode": True}
    }


def test_nested_update_merges(service: PreferencesService):
    service.update_section("display", {"notifications": {"maintenance": True}})

    notifications = service.get_section("display")["notifications"]
    assert notifications == {"email": True, "system": True, "security": True, "maintenance": True}


def test_rejects_unknown_and_mistyped_values(service: PreferencesService):
    with pytest.raises(EntityNotFoundError):
        service.get_section("billing")
    with pytest.raises(EntityNotFoundError):
        service.update_section("billing", {})
    with pytest.raises(ValidationError):
        service.update_section("system", {"colour": "blue"})
    with pytest.raises(ValidationError):
        service.update_section("system", {"auto_updates": 1})
    with pytest.raises(ValidationError):
        service.update_section("display", {"items_per_page": "many"})
    with pytest.raises(ValidationError):
        service.update_section("display", {"notifications": {"sms": True}})


def test_corrupt_file_falls_back_to_defaults(service: PreferencesService, prefs_file):
    prefs_file.parent.mkdir(parents=True)
    prefs_file.write_text("{not json")

    assert service.get_section("user")["username"] == "admin"


def test_stale_keys_in_file_are_ignored(service: PreferencesService, prefs_file):
    prefs_file.parent.mkdir(parents=True)
    prefs_file.write_text(json.dumps({"user": {"username": "ops", "legacy": 1, "notifications": "yes"}}))

    user = service.get_section("user")
    assert user["username"] == "ops"
    assert "legacy" not in user
    assert user["notifications"] is True


def test_update_replaces_malformed_section_in_file(service: PreferencesService, prefs_file):
    prefs_file.parent.mkdir(parents=True)
    prefs_file.write_text(json.dumps({"system": "oops", "display": {"notifications": 7}}))

    system = service.update_section("system", {"timezone": "Europe/Paris"})
    display = service.update_section("display", {"notifications": {"email": False}})

    assert system["timezone"] == "Europe/Paris"
    assert display["notifications"]["email"] is False
    assert display["notifications"]["system"] is True
    assert json.loads(prefs_file.read_text())["system"] == {"timezone": "Europe/Paris"}


def test_nested_values_are_type_checked(service: PreferencesService, prefs_file):
    with pytest.raises(ValidationError):
        service.update_section("display", {"notifications": {"email": "definitely"}})

    prefs_file.parent.mkdir(parents=True, exist_ok=True)
    prefs_file.write_text(json.dumps({"display": {"notifications": {"email": "definitely", "maintenance": True}}}))

    notifications = service.get_section("display")["notifications"]
    assert notifications["email"] is True
    assert notifications["maintenance"] is True
