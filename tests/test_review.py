from datetime import datetime

import pytest

from moralbook.pipeline import ReviewImageStore


def test_folder_name_is_slugged_and_timestamped():
    name = ReviewImageStore.folder_name_for(
        "Mia & the Moon!", "Mia Rose", now=datetime(2024, 5, 1, 8, 30, 0)
    )

    assert name == "20240501-083000_mia-rose_mia-the-moon"


def test_save_page_image_writes_decoded_bytes(tmp_path):
    store = ReviewImageStore(tmp_path)

    path = store.save_page_image("data:image/jpeg;base64,aGVsbG8=", "story", 3)

    assert path == tmp_path / "story" / "page-03.jpg"
    assert path.read_bytes() == b"hello"
    assert not (tmp_path / "story" / "story.yaml").exists()


def test_save_page_image_rejects_remote_references(tmp_path):
    with pytest.raises(ValueError):
        ReviewImageStore(tmp_path).save_page_image("https://img/1.png", "story", 1)


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.delenv("MORALBOOK_REVIEW_DIR", raising=False)
    assert ReviewImageStore.from_env() is None

    monkeypatch.setenv("MORALBOOK_REVIEW_DIR", str(tmp_path))
    assert ReviewImageStore.from_env().root_dir == tmp_path
