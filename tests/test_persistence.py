from pathlib import Path

import pytest

from checklist.errors import ValidationError
from checklist.persistence.filesystem import FileStorage
from checklist.persistence.preferences import DEFAULT_PREFERENCES, PreferenceStore


def test_file_storage_creates_named_directory(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    directory = storage.directory("preferences")

    assert directory.exists()
    assert directory.is_dir()
    assert directory.parent == tmp_path.resolve()


def test_file_storage_writes_and_reads_json(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    path = tmp_path / "nested" / "doc.json"

    storage.write_json(path, {"região": "Belo Horizonte-MG"})

    assert path.read_text(encoding="utf-8") == '{\n  "região": "Belo Horizonte-MG"\n}'
    assert storage.read_json(path) == {"região": "Belo Horizonte-MG"}
    assert storage.read_json(tmp_path / "missing.json", default={}) == {}


def test_preferences_default_until_written(tmp_path: Path) -> None:
    store = PreferenceStore(FileStorage(root=tmp_path))

    assert store.load("device-1") == DEFAULT_PREFERENCES

    store.update("device-1", theme="dark")

    assert store.load("device-1")["theme"] == "dark"
    assert store.load("device-2")["theme"] == "light"


def test_remember_login_round_trip(tmp_path: Path) -> None:
    store = PreferenceStore(FileStorage(root=tmp_path))

    store.remember_login("device-1", "ana@example.com", True)
    assert store.load("device-1")["rememberedEmail"] == "ana@example.com"
    assert store.load("device-1")["rememberMe"] is True

    store.remember_login("device-1", "ana@example.com", False)
    assert store.load("device-1")["rememberedEmail"] is None
    assert store.load("device-1")["rememberMe"] is False


def test_unsafe_owner_keys_are_rejected(tmp_path: Path) -> None:
    store = PreferenceStore(FileStorage(root=tmp_path))

    for owner in ("../../etc/passwd", "a/b", ".hidden", ""):
        with pytest.raises(ValidationError):
            store.update(owner, theme="dark")

    store.update("a_b", theme="dark")

    assert [path.name for path in (tmp_path / "preferences").iterdir()] == ["a_b.json"]
    assert store.load("a_b")["theme"] == "dark"


def test_distinct_owner_keys_do_not_share_a_file(tmp_path: Path) -> None:
    store = PreferenceStore(FileStorage(root=tmp_path))

    store.update("device.1", theme="dark")

    assert store.load("device-1")["theme"] == "light"
    assert store.load("device_1")["theme"] == "light"
