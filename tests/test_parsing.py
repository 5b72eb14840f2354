"""
Tests for model output parsing.

Fence stripping must be transparent: a JSON body wrapped in ```json or a
bare ``` fence parses to exactly what the unwrapped body parses to.
"""

import json
import string

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from decisionhub.ai.parsing import parse_model_json, strip_code_fence
from decisionhub.errors import ParseFailure
from decisionhub.schemas.analysis import AnalysisPayload
from decisionhub.schemas.insights import InsightsPayload
from decisionhub.schemas.simulation import SimulationPayload
from tests.fakes import ANALYSIS_JSON, INSIGHTS_JSON, SIMULATION_JSON

_safe_text = st.text(alphabet=string.ascii_letters + string.digits + " .,-", max_size=20)
_json_values = st.recursive(
    st.one_of(st.none(), st.booleans(), st.integers(-10**6, 10**6), _safe_text),
    lambda children: st.one_of(
        st.lists(children, max_size=4),
        st.dictionaries(st.text(alphabet=string.ascii_letters, min_size=1, max_size=8), children, max_size=4),
    ),
    max_leaves=12,
)


class TestStripCodeFence:
    def test_plain_text_untouched(self):
        assert strip_code_fence('{"a": 1}') == '{"a": 1}'

    def test_json_fence(self):
        assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence(self):
        assert strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_fence_with_surrounding_prose(self):
        text = 'Here is the analysis:\n```json\n{"a": 1}\n```\nLet me know.'
        assert strip_code_fence(text) == '{"a": 1}'

    def test_json_fence_preferred_over_bare(self):
        text = '```\n[1]\n```\n```json\n[2]\n```'
        assert strip_code_fence(text) == "[2]"

    def test_crlf_json_fence(self):
        assert strip_code_fence('```json\r\n{"a": 1}\r\n```') == '{"a": 1}'

    def test_crlf_bare_fence(self):
        assert strip_code_fence('```\r\n{"a": 1}\r\n```') == '{"a": 1}'

    def test_single_line_fence(self):
        assert strip_code_fence('```json {"a": 1} ```') == '{"a": 1}'
        assert strip_code_fence('```{"a": 1}```') == '{"a": 1}'


class TestFenceRoundTrip:
    @given(
        value=_json_values,
        indent=st.sampled_from([None, 2]),
        newline=st.sampled_from(["\n", "\r\n", ""]),
    )
    @settings(max_examples=200)
    def test_fenced_equals_unfenced(self, value, indent, newline):
        body = json.dumps(value, indent=indent)
        expected = json.loads(strip_code_fence(body))
        assert json.loads(strip_code_fence(f"```json{newline}{body}{newline}```")) == expected
        assert json.loads(strip_code_fence(f"```{newline}{body}{newline}```")) == expected


class TestParseModelJson:
    def test_analysis_payload(self):
        payload = parse_model_json(json.dumps(ANALYSIS_JSON), AnalysisPayload)
        assert payload.recommended_path == "Pilot"
        assert payload.key_arguments.for_ == ["Larger market"]
        assert payload.model_dump(by_alias=True)["key_arguments"]["for"] == ["Larger market"]

    def test_fenced_analysis_payload(self):
        fenced = f"```json\n{json.dumps(ANALYSIS_JSON, indent=2)}\n```"
        assert parse_model_json(fenced, AnalysisPayload) == parse_model_json(
            json.dumps(ANALYSIS_JSON), AnalysisPayload
        )

    def test_crlf_fenced_insights_payload(self):
        fenced = "```json\r\n" + json.dumps(INSIGHTS_JSON) + "\r\n```"
        payload = parse_model_json(fenced, InsightsPayload)
        assert payload.overall_summary == INSIGHTS_JSON["overall_summary"]

    def test_invalid_json_is_parse_failure(self):
        with pytest.raises(ParseFailure) as exc_info:
            parse_model_json("I think you should launch.", AnalysisPayload)
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Failed to parse AI response"

    def test_missing_required_field_is_parse_failure(self):
        data = dict(ANALYSIS_JSON)
        del data["recommended_path"]
        with pytest.raises(ParseFailure):
            parse_model_json(json.dumps(data), AnalysisPayload)

    def test_mistyped_field_is_parse_failure(self):
        data = dict(ANALYSIS_JSON, blind_spots="none")
        with pytest.raises(ParseFailure):
            parse_model_json(json.dumps(data), AnalysisPayload)

    def test_simulation_iterations_forced(self):
        payload = parse_model_json(json.dumps(SIMULATION_JSON), SimulationPayload)
        assert payload.simulation_results.iterations == 100
        assert payload.worst_case.impact == "8"
        assert payload.simulation_results.variance == "0.2"

    def test_insights_optional_lists_default_empty(self):
        data = {k: v for k, v in INSIGHTS_JSON.items() if k not in ("opportunities", "blind_spots")}
        payload = parse_model_json(json.dumps(data), InsightsPayload)
        assert payload.opportunities == []
        assert payload.blind_spots == []
