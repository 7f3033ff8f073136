from unittest import mock

import requests

from moralbook import GeneratedStory, StoryPage, StorybookPDFBuilder

# 1x1 transparent PNG.
TINY_PNG = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


def _story() -> GeneratedStory:
    return GeneratedStory(
        title="The Sharing Tree",
        pages=[
            StoryPage(1, "Noah shared his apples.", "https://img/1.png", TINY_PNG),
            StoryPage(2, "Everyone smiled.", "/placeholder-illustration.svg"),
        ],
    )


def test_build_writes_pdf_with_embedded_and_placeholder_pages(tmp_path):
    output = tmp_path / "out" / "story.pdf"

    with mock.patch("moralbook.pdf_generation.builder.requests.get") as get:
        StorybookPDFBuilder().build(_story(), output, child_name="Noah")

    get.assert_not_called()
    data = output.read_bytes()
    assert data.startswith(b"%PDF")
    # cover + (text + image) per page
    assert b"/Count 5" in data


def test_remote_image_fetch_failure_falls_back_to_placeholder(tmp_path):
    story = GeneratedStory(title="T", pages=[StoryPage(1, "Hi.", "https://img/broken.png")])
    output = tmp_path / "story.pdf"

    with mock.patch(
        "moralbook.pdf_generation.builder.requests.get",
        side_effect=requests.ConnectionError("offline"),
    ) as get:
        StorybookPDFBuilder(request_timeout=3).build(story, output)

    get.assert_called_once_with("https://img/broken.png", timeout=3)
    assert output.read_bytes().startswith(b"%PDF")


def test_build_from_yaml(tmp_path):
    story_path = tmp_path / "story.yaml"
    story_path.write_text(_story().to_yaml(), encoding="utf-8")
    output = tmp_path / "story.pdf"

    with mock.patch("moralbook.pdf_generation.builder.requests.get"):
        StorybookPDFBuilder().build_from_yaml(story_path, output)

    assert output.exists()
