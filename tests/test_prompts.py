import os

import pytest

from prompts import PROMPT_FILES, load_prompt_template, render_prompt


def _reset_prompt_cache():
    try:
        load_prompt_template.cache_clear()  # type: ignore[attr-defined]
    except AttributeError:
        pass


@pytest.fixture(autouse=True)
def clear_prompt_overrides():
    prefix = "MEETUP_PLANNER_PROMPT_"
    for key in list(os.environ.keys()):
        if key.startswith(prefix):
            os.environ.pop(key)
    _reset_prompt_cache()
    yield
    _reset_prompt_cache()


def test_extract_prompt_requests_json_array():
    rendered = render_prompt(
        "extract_venues", location="Hauz Khas", tag="food", max_venues=5, page_text="Some article"
    )
    assert "Hauz Khas" in rendered
    assert "Some article" in rendered
    assert '{"name": "...", "address": "..."' in rendered
    assert "json array" in rendered.lower()


def test_theme_prompt_renders_literal_json_example():
    rendered = render_prompt(
        "theme_itinerary",
        theme="Balanced",
        group_description="a group of 3",
        location="Hauz Khas",
        mode_guidance="Have fun.",
        mood_tags="food",
        budget="500",
        max_cost="1000",
        venue_lines="- Olive Bistro",
    )
    assert rendered.startswith("# Balanced Itinerary")
    assert '"steps": [{"venue": "...", "activity": "..."}]' in rendered
    assert "- Olive Bistro" in rendered


def test_suggestions_prompt_lists_locations_shape():
    template = load_prompt_template("ai_suggestions")
    assert '{{"locations"' in template.text


def test_every_registered_prompt_loads():
    for name, filename in PROMPT_FILES.items():
        assert load_prompt_template(name, filename).text.strip()


def test_missing_placeholder_raises_value_error():
    with pytest.raises(ValueError, match="theme_itinerary"):
        render_prompt("theme_itinerary", theme="Balanced")


def test_environment_override_prefers_file(tmp_path):
    override_file = tmp_path / "custom_prompt.txt"
    override_file.write_text("Custom prompt for {tag}", encoding="utf-8")
    os.environ["MEETUP_PLANNER_PROMPT_EXTRACT_VENUES"] = str(override_file)

    assert render_prompt("extract_venues", tag="food") == "Custom prompt for food"


def test_environment_override_accepts_literal_text():
    os.environ["MEETUP_PLANNER_PROMPT_AI_SUGGESTIONS"] = "Literal prompt"

    assert load_prompt_template("ai_suggestions").text == "Literal prompt"


def test_unknown_prompt_name():
    with pytest.raises(KeyError):
        load_prompt_template("does_not_exist")
