import pytest

from quiz_engine.errors import MalformedRequestError
from quiz_engine.prompts import build_prompt, parse_data_uri
from quiz_engine.schemas import GenerationRequest

CONFIG = {"language": "Spanish", "difficulty": "Hard", "type": "Fill Blanks", "count": 7}


def request_for(mode, content, **config):
    return GenerationRequest.model_validate({"mode": mode, "content": content, "config": {**CONFIG, **config}})


@pytest.mark.parametrize(
    "mode,content",
    [
        ("topic", "Photosynthesis"),
        ("text", "Plants turn light into chemical energy."),
        ("file", "data:image/png;base64,AAAA"),
    ],
)
def test_prompt_contains_config_values(mode, content):
    prompt, _ = build_prompt(request_for(mode, content))

    assert "Spanish" in prompt
    assert "Difficulty: Hard" in prompt
    assert "Fill Blanks" in prompt
    assert "Count: 7" in prompt


def test_prompt_uses_type_specific_instructions():
    prompt, _ = build_prompt(request_for("topic", "Optics", type="Mixed"))
    assert "VARIETY MODE" in prompt
    assert "Assertion-Reasoning" in prompt

    prompt, _ = build_prompt(request_for("topic", "Optics", type="True/False"))
    assert "Identify the TRUE (or FALSE) statement." in prompt
    assert "VARIETY MODE" not in prompt


def test_metadata_forced_to_english_and_content_to_language():
    prompt, _ = build_prompt(request_for("topic", "Optics", language="French"))

    assert "MUST BE IN ENGLISH" in prompt
    assert "You MUST write these in **French**" in prompt


def test_topic_prompt_embeds_topic():
    prompt, attachment = build_prompt(request_for("topic", "The French Revolution"))

    assert 'TOPIC: "The French Revolution"' in prompt
    assert attachment is None


def test_text_content_is_truncated_to_prefix():
    content = "".join(chr(ord("a") + i % 26) for i in range(25000))

    prompt, _ = build_prompt(request_for("text", content))

    start = prompt.index('"') + 1
    embedded = prompt[start : prompt.index('"', start)]
    assert len(embedded) == 10000
    assert embedded == content[:10000]
    assert content[:10001] not in prompt


def test_short_text_is_embedded_whole():
    prompt, _ = build_prompt(request_for("text", "Short passage."))
    assert '"Short passage."' in prompt


def test_text_limit_is_configurable():
    prompt, _ = build_prompt(request_for("text", "x" * 50), max_text_chars=20)
    assert '"' + "x" * 20 + '"' in prompt
    assert "x" * 21 not in prompt


def test_file_mode_returns_attachment():
    prompt, attachment = build_prompt(request_for("file", "data:image/png;base64,AAAA"))

    assert attachment.mime_type == "image/png"
    assert attachment.data == "AAAA"
    assert "AAAA" not in prompt
    assert "Visual Data Analyst" in prompt


def test_parse_data_uri_defaults_empty_mime_type():
    attachment = parse_data_uri("data:;base64,AAAA")
    assert attachment.mime_type == "image/jpeg"


@pytest.mark.parametrize(
    "content",
    [
        "AAAA",
        "data:image/png,AAAA",
        "data:image/png;base64",
        "data:image/png;base64,",
        "data:image/png;base64,not base64!",
        "image/png;data:,AAAA",
    ],
)
def test_parse_data_uri_rejects_malformed_content(content):
    with pytest.raises(MalformedRequestError):
        parse_data_uri(content)


def test_summary_can_be_left_out():
    prompt, _ = build_prompt(request_for("topic", "Optics"), include_summary=False)
    assert '"summary"' not in prompt

    prompt, _ = build_prompt(request_for("topic", "Optics"))
    assert '"summary"' in prompt


def test_parse_data_uri_accepts_wrapped_base64():
    attachment = parse_data_uri("data:image/png;base64,AAAA\nAAAA\r\n")

    assert attachment.mime_type == "image/png"
    assert attachment.data == "AAAA\nAAAA"


def test_parse_data_uri_rejects_payload_without_base64_characters():
    with pytest.raises(MalformedRequestError):
        parse_data_uri("data:image/png;base64,!!!!")
