"""Tests for CSV blip import and the sample file."""

from __future__ import annotations

import random

import pytest

from tech_radar.radar.csv_import import (
    CsvImportError,
    build_sample_csv,
    parse_blip_csv,
)
from tech_radar.radar.defaults import DEFAULT_QUADRANTS, DEFAULT_RINGS
from tech_radar.radar.models import Quadrant, Ring

QUADRANTS = [Quadrant(id=f"q{d['position']}", **d) for d in DEFAULT_QUADRANTS]
RINGS = [Ring(id=f"r{d['position']}", **d) for d in DEFAULT_RINGS]


def _parse(text: str, seed: int = 0):
    return parse_blip_csv(text, QUADRANTS, RINGS, random.Random(seed))


# ---------------------------------------------------------------------------
# parse_blip_csv
# ---------------------------------------------------------------------------


class TestParseBlipCsv:
    def test_valid_rows_become_drafts(self):
        text = (
            "name,quadrant,ring,description,isNew\n"
            "React,Languages & Frameworks,Adopt,UI library,false\n"
            "Deno,platforms,ASSESS,,yes\n"
        )
        result = _parse(text)
        assert result.errors == []
        assert result.imported == 2
        react, deno = result.drafts
        assert (react.name, react.quadrant_id, react.ring_id) == ("React", "q3", "r0")
        assert react.description == "UI library"
        assert react.is_new is False
        assert (deno.quadrant_id, deno.ring_id) == ("q1", "r2")
        assert deno.description is None
        assert deno.is_new is True
        assert result.message is None

    def test_header_is_case_insensitive_and_reorderable(self):
        text = "Ring,NAME,Quadrant\nTrial,Vite,Tools\n"
        (draft,) = _parse(text).drafts
        assert (draft.name, draft.quadrant_id, draft.ring_id) == ("Vite", "q2", "r1")

    def test_is_new_defaults_true_without_column(self):
        (draft,) = _parse("name,quadrant,ring\nVite,Tools,Adopt\n").drafts
        assert draft.is_new is True

    @pytest.mark.parametrize(
        "value, expected",
        [("true", True), ("TRUE", True), ("yes", True), ("1", True),
         ("false", False), ("no", False), ("0", False), ("", False)],
    )
    def test_is_new_values(self, value, expected):
        (draft,) = _parse(f"name,quadrant,ring,isNew\nVite,Tools,Adopt,{value}\n").drafts
        assert draft.is_new is expected

    def test_offsets_inside_central_band(self):
        rows = "\n".join(f"B{i},Tools,Hold" for i in range(50))
        result = _parse("name,quadrant,ring\n" + rows)
        for draft in result.drafts:
            assert 0.2 <= draft.offset_x <= 0.8
            assert 0.2 <= draft.offset_y <= 0.8

    def test_quoted_comma_and_escaped_quote(self):
        text = (
            "name,quadrant,ring,description\n"
            'React,Languages & Frameworks,Adopt,"A library, by ""Meta"""\n'
        )
        (draft,) = _parse(text).drafts
        assert draft.description == 'A library, by "Meta"'

    def test_quoted_newline_in_description(self):
        text = 'name,quadrant,ring,description\nReact,Tools,Adopt,"line one\nline two"\n'
        (draft,) = _parse(text).drafts
        assert draft.description == "line one\nline two"

    def test_blank_lines_are_ignored(self):
        text = "name,quadrant,ring\n\nVite,Tools,Adopt\n\n"
        result = _parse(text)
        assert result.imported == 1
        assert result.drafts[0].row == 2

    def test_bad_rows_reported_and_skipped(self):
        text = (
            "name,quadrant,ring\n"
            "Vite,Tools,Adopt\n"
            ",Tools,Adopt\n"
            "Swift,Mobile,Adopt\n"
            "Rust,Tools,Someday\n"
        )
        result = _parse(text)
        assert result.imported == 1
        assert result.errors == [
            "Row 3: missing name",
            'Row 4: unknown quadrant "Mobile". '
            "Valid: techniques, platforms, tools, languages & frameworks",
            'Row 5: unknown ring "Someday". Valid: adopt, trial, assess, hold',
        ]
        assert result.message.startswith("Imported 1 blip(s) with 3 error(s):\n")
        assert result.message.endswith('Valid: adopt, trial, assess, hold')

    def test_overlong_name_is_skipped(self):
        text = f"name,quadrant,ring\n{'X' * 300},Tools,Adopt\nVite,Tools,Adopt\n"
        result = _parse(text)
        assert [d.name for d in result.drafts] == ["Vite"]
        assert result.errors == ["Row 2: name too long (max 100)"]

    def test_overlong_description_is_skipped(self):
        text = f"name,quadrant,ring,description\nVite,Tools,Adopt,{'d' * 1001}\n"
        result = _parse(text)
        assert result.imported == 0
        assert result.errors == ["Row 2: description too long (max 1000)"]

    def test_lengths_at_the_limit_are_accepted(self):
        name, description = "N" * 100, "d" * 1000
        text = f"name,quadrant,ring,description\n{name},Tools,Adopt,{description}\n"
        (draft,) = _parse(text).drafts
        assert (draft.name, draft.description) == (name, description)

    def test_length_is_measured_after_trimming(self):
        text = f"name,quadrant,ring\n  {'N' * 100}  ,Tools,Adopt\n"
        (draft,) = _parse(text).drafts
        assert len(draft.name) == 100

    def test_short_row_reports_unknown_ring(self):
        result = _parse("name,quadrant,ring\nVite,Tools\n")
        assert result.errors == ['Row 2: unknown ring "". Valid: adopt, trial, assess, hold']

    def test_header_only_is_rejected(self):
        with pytest.raises(CsvImportError, match="at least one data row"):
            _parse("name,quadrant,ring\n")

    def test_empty_text_is_rejected(self):
        with pytest.raises(CsvImportError):
            _parse("")

    def test_missing_required_column_is_rejected(self):
        with pytest.raises(CsvImportError, match="name, quadrant, ring"):
            _parse("name,quadrant,description\nVite,Tools,x\n")

    def test_import_error_is_value_error(self):
        assert issubclass(CsvImportError, ValueError)


# ---------------------------------------------------------------------------
# build_sample_csv
# ---------------------------------------------------------------------------


class TestSampleCsv:
    def test_default_names(self):
        lines = build_sample_csv(
            [q.name for q in QUADRANTS], [r.name for r in RINGS]
        ).split("\n")
        assert lines[0] == "name,quadrant,ring,description,isNew"
        assert lines[1] == "React,Languages & Frameworks,Adopt,Our primary frontend framework,false"
        assert len(lines) == 6

    def test_uses_radar_names_and_quotes_commas(self):
        text = build_sample_csv(
            ["Practices", "Infra", "Tooling", "Code, Languages"], ["Use", "Try", "Look", "Stop"]
        )
        assert 'React,"Code, Languages",Use,' in text
        assert "Deno,Infra,Look," in text

    def test_missing_positions_fall_back_to_defaults(self):
        text = build_sample_csv(["Practices"], [])
        assert "Pair Programming,Practices,Trial," in text
        assert "Vite,Tools,Adopt," in text

    def test_sample_reimports_cleanly(self):
        text = build_sample_csv([q.name for q in QUADRANTS], [r.name for r in RINGS])
        result = _parse(text)
        assert result.errors == []
        assert [d.name for d in result.drafts] == [
            "React", "Kubernetes", "Deno", "Pair Programming", "Vite",
        ]
