import pytest

from moralbook.story_generation import (
    MORALS,
    ChildProfile,
    InvalidMoralError,
    get_age_group,
    get_age_settings,
    get_moral_by_id,
    require_moral,
    validate_page_count,
)


@pytest.mark.parametrize(
    "age, group, page_count",
    [(2, "2-3", 4), (3, "2-3", 4), (4, "4-5", 4), (5, "4-5", 4), (6, "6-7", 6), (7, "6-7", 6), (8, "8-10", 6), (12, "8-10", 6)],
)
def test_age_brackets_select_by_upper_bound(age, group, page_count):
    assert get_age_group(age) == group
    assert get_age_settings(age).page_count == page_count


def test_moral_lookup():
    assert get_moral_by_id("kindness").label == "Kindness"
    assert get_moral_by_id("unknown") is None
    assert len({moral.id for moral in MORALS}) == len(MORALS) == 10


def test_require_moral_raises_value_error_subclass():
    with pytest.raises(InvalidMoralError, match="Invalid moral"):
        require_moral("not-a-real-moral")
    assert issubclass(InvalidMoralError, ValueError)


@pytest.mark.parametrize("value", [4, 10, 16])
def test_validate_page_count_accepts_range(value):
    assert validate_page_count(value) == value


@pytest.mark.parametrize("value", [3, 17, -1, True, "6"])
def test_validate_page_count_rejects_out_of_range(value):
    with pytest.raises(ValueError):
        validate_page_count(value)


def test_profile_from_camel_case_mapping():
    profile = ChildProfile.from_mapping(
        {
            "id": "c1",
            "name": " Ava ",
            "age": "4",
            "gender": "female",
            "skinTone": "dark",
            "eyeColor": "brown",
            "hairColor": "black",
            "hairStyle": "braided",
            "interests": ["dance", " ", "cats"],
        }
    )

    assert profile.name == "Ava"
    assert profile.age == 4
    assert profile.hair_style == "braided"
    assert profile.interests == ("dance", "cats")
    assert profile.is_female


def test_profile_from_snake_case_mapping_with_string_interests():
    profile = ChildProfile.from_mapping(
        {
            "name": "Sam",
            "age": 7,
            "gender": "male",
            "skin_tone": "fair",
            "eye_color": "blue",
            "hair_color": "red",
            "interests": "space, dinosaurs",
        }
    )

    assert profile.hair_style is None
    assert profile.interests == ("space", "dinosaurs")
    assert not profile.is_female


@pytest.mark.parametrize(
    "data",
    [{"age": 5}, {"name": "  ", "age": 5}, {"name": "Kid"}, {"name": "Kid", "age": "five"}],
)
def test_profile_rejects_missing_name_or_bad_age(data):
    with pytest.raises(ValueError):
        ChildProfile.from_mapping(data)
