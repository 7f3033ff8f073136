import pytest

from moralbook.pipeline import GeneratedStory, StoryPage


def _story() -> GeneratedStory:
    return GeneratedStory(
        title="Brave Little Fox",
        pages=[
            StoryPage(1, "Fox looked at the dark woods.", "https://img/1.png", "data:image/png;base64,AA=="),
            StoryPage(2, "Fox stepped forward.", "/placeholder-illustration.svg"),
        ],
    )


def test_to_dict_uses_wire_keys_and_omits_missing_encoding():
    payload = _story().to_dict()

    assert payload["title"] == "Brave Little Fox"
    assert payload["pages"][0] == {
        "pageNumber": 1,
        "text": "Fox looked at the dark woods.",
        "imageUrl": "https://img/1.png",
        "imageBase64": "data:image/png;base64,AA==",
    }
    assert "imageBase64" not in payload["pages"][1]


def test_yaml_file_round_trip(tmp_path):
    path = tmp_path / "story.yaml"
    path.write_text(_story().to_yaml(), encoding="utf-8")

    assert GeneratedStory.from_yaml(path) == _story()


def test_from_dict_accepts_snake_case_pages():
    story = GeneratedStory.from_dict(
        {"title": "T", "pages": [{"page_number": "3", "text": "Hi", "image_url": "u"}]}
    )

    assert story.pages == [StoryPage(3, "Hi", "u")]


@pytest.mark.parametrize("payload", [{"title": "T"}, {"pages": [{"text": "no number"}]}])
def test_from_dict_rejects_invalid_payloads(payload):
    with pytest.raises(ValueError):
        GeneratedStory.from_dict(payload)
