import json
import pytest

from ideaboard.core.idea_parser import (
    DEFAULT_AUDIENCE,
    DEFAULT_KEYWORDS,
    PLACEHOLDER_DESCRIPTION,
    ParseTier,
    iter_brace_spans,
    normalize_engagement,
    normalize_keywords,
    parse_ideas,
    parse_ideas_result,
    split_blocks,
)


def _record(title, **extra):
    record = {
        "title": title,
        "description": f"About {title}",
        "keywords": ["k1", "k2"],
        "targetAudience": "Marketers",
        "estimatedEngagement": "high",
    }
    record.update(extra)
    return record


@pytest.mark.unit
def test_structured_list_is_taken_verbatim():
    records = [_record("One"), _record("Two", estimatedEngagement="low"), _record("Three")]
    result = parse_ideas_result(json.dumps(records), 3)
    assert result.tier is ParseTier.STRUCTURED_LIST
    assert [i.title for i in result.ideas] == ["One", "Two", "Three"]
    assert result.ideas[0].description == "About One"
    assert result.ideas[0].keywords == ["k1", "k2"]
    assert result.ideas[0].target_audience == "Marketers"
    assert [i.estimated_engagement for i in result.ideas] == ["high", "low", "high"]


@pytest.mark.unit
def test_structured_list_inside_code_fence():
    text = "```json\n" + json.dumps([_record("Fenced")]) + "\n```"
    result = parse_ideas_result(text, 1)
    assert result.tier is ParseTier.STRUCTURED_LIST
    assert result.ideas[0].title == "Fenced"


@pytest.mark.unit
def test_snake_case_keys_are_accepted():
    text = json.dumps([{"title": "Snake", "description": "d", "target_audience": "Devs", "estimated_engagement": "Low"}])
    idea = parse_ideas(text, 1)[0]
    assert idea.target_audience == "Devs"
    assert idea.estimated_engagement == "low"


@pytest.mark.unit
def test_malformed_record_is_dropped_and_others_kept():
    good = [json.dumps(_record(t)) for t in ("A", "B", "C")]
    text = "[" + good[0] + ", " + good[1] + ', {"title": "Broken", "description": oops}, ' + good[2] + "]"
    result = parse_ideas_result(text, 4)
    assert result.tier is ParseTier.EXTRACTED_RECORDS
    assert [i.title for i in result.ideas] == ["A", "B", "C"]


@pytest.mark.unit
def test_records_embedded_in_prose():
    text = (
        "Sure! Here are some ideas.\n"
        + json.dumps(_record("Prose One"))
        + "\nand another one:\n"
        + json.dumps(_record("Prose Two", description="Has {braces} inside"))
        + "\nHope that helps"
    )
    result = parse_ideas_result(text, 2)
    assert result.tier is ParseTier.EXTRACTED_RECORDS
    assert [i.title for i in result.ideas] == ["Prose One", "Prose Two"]
    assert result.ideas[1].description == "Has {braces} inside"


@pytest.mark.unit
def test_unclosed_brace_is_skipped():
    spans = list(iter_brace_spans('{"title": "open" ... {"title": "closed"}'))
    assert spans == ['{"title": "closed"}']


@pytest.mark.unit
def test_missing_keywords_default():
    text = json.dumps([{"title": "No keywords", "description": "Nothing to tag"}])
    idea = parse_ideas(text, 1)[0]
    assert idea.keywords == list(DEFAULT_KEYWORDS)
    assert idea.target_audience == DEFAULT_AUDIENCE
    assert idea.estimated_engagement == "medium"


@pytest.mark.unit
def test_segmented_text_with_labels():
    text = (
        "1. Budgeting Basics\n"
        "Description: Teach simple budgeting.\n"
        "Keywords: budget, money\n"
        "Audience: Students\n"
        "Engagement: High\n"
        "\n"
        "2. Saving Hacks\n"
        "Description: Quick saving tips.\n"
        "Keywords: saving\n"
    )
    result = parse_ideas_result(text, 2)
    assert result.tier is ParseTier.SEGMENTED_TEXT
    first, second = result.ideas
    assert first.title == "Budgeting Basics"
    assert first.description == "Teach simple budgeting."
    assert first.keywords == ["budget", "money"]
    assert first.target_audience == "Students"
    assert first.estimated_engagement == "high"
    assert second.title == "Saving Hacks"
    assert second.keywords == ["saving"]
    assert second.target_audience == DEFAULT_AUDIENCE
    assert second.estimated_engagement == "medium"


@pytest.mark.unit
def test_segmented_text_is_capped_at_count():
    text = "1. First idea\nBody one\n2. Second idea\nBody two\n3. Third idea\nBody three"
    ideas = parse_ideas(text, 2)
    assert [i.title for i in ideas] == ["First idea", "Second idea"]
    assert ideas[0].description == "Body one"


@pytest.mark.unit
def test_bulleted_field_lines_stay_in_their_block():
    text = "Idea 1: Podcast launch\n- Keywords: audio, launch\n- Audience: Creators"
    blocks = split_blocks(text)
    assert len(blocks) == 1
    idea = parse_ideas(text, 1)[0]
    assert idea.title == "Podcast launch"
    assert idea.keywords == ["audio", "launch"]
    assert idea.target_audience == "Creators"


@pytest.mark.unit
@pytest.mark.parametrize("text", ["", "   \n\n  ", "Here are your ideas:", None])
def test_unusable_text_yields_placeholders(text):
    result = parse_ideas_result(text, 5)
    assert result.tier is ParseTier.FAILED
    assert not result.ok
    assert [i.title for i in result.ideas] == [f"Content Idea {n}" for n in range(1, 6)]
    assert all(i.description == PLACEHOLDER_DESCRIPTION for i in result.ideas)
    assert all(i.keywords == list(DEFAULT_KEYWORDS) for i in result.ideas)


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw,expected",
    [
        ("High", "high"),
        ("very HIGH potential", "high"),
        ("low", "low"),
        ("Low to high", "high"),
        ("moderate", "medium"),
        ("", "medium"),
        (None, "medium"),
    ],
)
def test_normalize_engagement(raw, expected):
    assert normalize_engagement(raw) == expected


@pytest.mark.unit
def test_normalize_keywords_is_case_sensitive_and_ordered():
    assert normalize_keywords(["ai", "AI", "", "growth", "growth"]) == ["ai", "AI", "growth"]
    assert normalize_keywords(" seo ; content,, seo ") == ["seo", "content"]
    assert normalize_keywords(None) == []


@pytest.mark.unit
def test_records_wrapped_in_an_object():
    text = json.dumps({"ideas": [_record("Wrapped One"), _record("Wrapped Two"), _record("Wrapped Three")]}, indent=2)
    result = parse_ideas_result(text, 3)
    assert result.tier is ParseTier.EXTRACTED_RECORDS
    assert [i.title for i in result.ideas] == ["Wrapped One", "Wrapped Two", "Wrapped Three"]
    assert result.ideas[0].target_audience == "Marketers"


@pytest.mark.unit
def test_wrapper_with_one_broken_record_keeps_the_rest():
    good = [json.dumps(_record(t)) for t in ("A", "B")]
    text = '{"ideas": [' + good[0] + ', {"title": "Broken", "description": oops}, ' + good[1] + "]}"
    result = parse_ideas_result(text, 3)
    assert result.tier is ParseTier.EXTRACTED_RECORDS
    assert [i.title for i in result.ideas] == ["A", "B"]


@pytest.mark.unit
def test_lead_in_sentence_is_not_an_idea():
    text = "Sure! Here are three ideas.\n1. Alpha\nBody a\n2. Beta\nBody b\n3. Gamma\nBody c"
    result = parse_ideas_result(text, 3)
    assert result.tier is ParseTier.SEGMENTED_TEXT
    assert [i.title for i in result.ideas] == ["Alpha", "Beta", "Gamma"]
    assert result.ideas[0].description == "Body a"


@pytest.mark.unit
def test_engagement_label_variants_in_segmented_text():
    text = (
        "1. Launch recap\n"
        "Description: What shipped this week.\n"
        "Engagement Potential: High engagement potential\n"
        "\n"
        "2. Office tour\n"
        "Description: A walk around the office.\n"
        "Estimated Engagement: definitely low\n"
    )
    result = parse_ideas_result(text, 2)
    assert result.tier is ParseTier.SEGMENTED_TEXT
    assert [i.estimated_engagement for i in result.ideas] == ["high", "low"]
