import pytest

from marketing_toolkit.models.generation import (
    AdCopyBrief,
    AttachmentPart,
    BinaryAttachment,
    GenerationIntent,
    GenerationTool,
    TextPart,
    TrendAnalysisRequest,
)
from marketing_toolkit.services import request_builder
from marketing_toolkit.services.request_builder import (
    AD_COPY_SYSTEM_PROMPT,
    TREND_ANALYSIS_SYSTEM_PROMPT,
    ad_copy_intent,
    ad_copy_response_schema,
    build,
    to_provider_schema,
    trend_analysis_intent,
)

PDF = BinaryAttachment(mime_type="application/pdf", base64_data="JVBERi0xLjQ=")


def test_text_only_intent():
    intent = GenerationIntent(prompt_parts=(TextPart(text="hello"),))
    payload = build(intent)

    assert payload == {"contents": [{"parts": [{"text": "hello"}]}]}


def test_attachment_precedes_text_with_instruction():
    intent = GenerationIntent(
        prompt_parts=(
            TextPart(text="first"),
            AttachmentPart(attachment=PDF),
            TextPart(text="second"),
        )
    )
    parts = build(intent)["contents"][0]["parts"]

    assert parts[0] == {"text": AttachmentPart(attachment=PDF).instruction}
    assert parts[1] == {"inlineData": {"mimeType": "application/pdf", "data": "JVBERi0xLjQ="}}
    assert parts[2:] == [{"text": "first"}, {"text": "second"}]


def test_system_instruction_is_separate_from_contents():
    intent = GenerationIntent(prompt_parts=(TextPart(text="x"),), system_instruction="Be brief.")
    payload = build(intent)

    assert payload["systemInstruction"] == {"parts": [{"text": "Be brief."}]}
    assert payload["contents"] == [{"parts": [{"text": "x"}]}]


def test_structured_intent_requests_json_with_schema():
    schema = {"type": "ARRAY", "items": {"type": "STRING"}}
    payload = build(GenerationIntent(prompt_parts=(TextPart(text="x"),), output_schema=schema))

    assert payload["generationConfig"] == {
        "responseMimeType": "application/json",
        "responseSchema": schema,
    }
    assert "tools" not in payload


def test_grounded_intent_enables_search_only():
    intent = GenerationIntent(
        prompt_parts=(TextPart(text="x"),),
        tools=frozenset({GenerationTool.GOOGLE_SEARCH}),
    )
    payload = build(intent)

    assert payload["tools"] == [{"google_search": {}}]
    assert "generationConfig" not in payload


def test_schema_and_search_are_mutually_exclusive():
    with pytest.raises(ValueError):
        GenerationIntent(
            prompt_parts=(TextPart(text="x"),),
            output_schema={"type": "STRING"},
            tools=frozenset({GenerationTool.GOOGLE_SEARCH}),
        )


def test_intent_requires_a_prompt_part():
    with pytest.raises(ValueError):
        GenerationIntent(prompt_parts=())


def test_build_does_not_share_schema_with_intent():
    intent = ad_copy_intent(AdCopyBrief())
    payload = build(intent)
    payload["generationConfig"]["responseSchema"]["type"] = "STRING"

    assert intent.output_schema["type"] == "ARRAY"
    assert build(intent) == build(intent)


def test_ad_copy_schema_shape():
    schema = ad_copy_response_schema()

    assert schema["type"] == "ARRAY"
    item = schema["items"]
    assert item["type"] == "OBJECT"
    assert set(item["properties"]) == {"style", "headline", "bodyCopy", "callToAction"}
    assert sorted(item["required"]) == sorted(["style", "headline", "bodyCopy", "callToAction"])
    assert all(p["type"] == "STRING" for p in item["properties"].values())
    assert item["properties"]["headline"]["description"] == "A compelling headline for the ad."


def test_ad_copy_schema_is_fresh_each_call():
    first = ad_copy_response_schema()
    first["items"]["properties"].clear()
    assert ad_copy_response_schema()["items"]["properties"]


def test_to_provider_schema_inlines_refs_and_drops_titles():
    schema = {
        "$defs": {
            "Thing": {
                "title": "Thing",
                "type": "object",
                "properties": {"name": {"title": "Name", "type": "string"}},
                "required": ["name"],
            }
        },
        "type": "array",
        "items": {"$ref": "#/$defs/Thing"},
    }

    assert to_provider_schema(schema) == {
        "type": "ARRAY",
        "items": {
            "type": "OBJECT",
            "properties": {"name": {"type": "STRING"}},
            "required": ["name"],
        },
    }


def test_ad_copy_intent_from_brief():
    brief = AdCopyBrief(product_name="CargoWise", num_variants=2, attachment=PDF)
    intent = ad_copy_intent(brief)

    assert intent.structured and not intent.grounded
    assert intent.system_instruction == AD_COPY_SYSTEM_PROMPT
    assert len(intent.attachments) == 1
    prompt = intent.prompt_parts[-1].text
    assert "Generate exactly 2 distinct ad copy variants" in prompt
    assert "  - Product Name: CargoWise\n" in prompt
    assert "Strategic Insight" not in prompt


def test_ad_copy_prompt_carries_seed_insight():
    brief = AdCopyBrief(seed_insight="Action / Insight: Lead with customs automation.")
    prompt = request_builder.ad_copy_prompt(brief)
    assert "  - Strategic Insight to build on: Action / Insight: Lead with customs automation.\n" in prompt


def test_trend_analysis_intent_is_grounded():
    intent = trend_analysis_intent(TrendAnalysisRequest(topic="Air freight capacity"))

    assert intent.grounded and not intent.structured
    assert intent.system_instruction == TREND_ANALYSIS_SYSTEM_PROMPT
    assert '"Air freight capacity"' in intent.prompt_parts[0].text


def test_trend_analysis_default_topic():
    intent = trend_analysis_intent()
    assert "Digital trends within the logistics industry" in intent.prompt_parts[0].text
