import pytest

from ballknowledge.analysis_pipeline.core.evaluation import MODE_PROFILES
from ballknowledge.analysis_pipeline.core.extraction import extract_record
from ballknowledge.analysis_pipeline.models import (
    ClipReference,
    CompetitiveEvaluation,
    DetailedAnalysis,
    EvaluationMode,
    SubjectContext,
)
from ballknowledge.analysis_pipeline.prompts_and_description import HIGHLIGHTS_PROMPT


def wire_keys(schema):
    return {field.alias or name for name, field in schema.model_fields.items()}


@pytest.mark.parametrize("mode", list(EvaluationMode))
def test_instruction_schema_matches_record_schema(mode):
    profile = MODE_PROFILES[mode]
    instructions = profile.render_instructions(ClipReference(locator="https://x/c.mp4"), SubjectContext())

    assert set(extract_record(instructions)) == wire_keys(profile.schema)


def test_competitive_breakdown_keys_match():
    profile = MODE_PROFILES[EvaluationMode.COMPETITIVE]
    instructions = profile.render_instructions(ClipReference(locator="https://x/c.mp4"), SubjectContext())
    example = extract_record(instructions)

    assert profile.schema is CompetitiveEvaluation
    assert set(example["detailedAnalysis"]) == set(DetailedAnalysis.model_fields)
    assert CompetitiveEvaluation.conform(example) == example


def test_highlight_example_is_a_valid_entry():
    example = extract_record(HIGHLIGHTS_PROMPT.format(label="game footage", display_name="Sam"))
    assert set(example["highlights"][0]) == {"timestamp", "description", "quality"}
