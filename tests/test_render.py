"""
Result rendering: field probing, placeholders and the numbered findings format.
"""

from types import SimpleNamespace
from unittest.mock import patch

import pytest

from evidence_retrieval.core.render import (
    NO_MATCHES,
    NO_CHUNK_CONTENT,
    NOT_FOUND,
    FINDING_SEPARATOR,
    SCORE_FIELDS,
    ID_FIELDS,
    probe_field,
    match_chunk,
    render_matches,
    log_matches,
    error_sentinel,
    classify_answer
)
from evidence_retrieval.vector.types import QueryMatch


class TestProbeField:

    def test_attribute_match(self):
        match = QueryMatch(id="vec-1", score=0.87, metadata={})

        assert probe_field(match, ID_FIELDS) == "vec-1"
        assert probe_field(match, SCORE_FIELDS) == 0.87

    def test_mapping_match(self):
        match = {"documentId": "doc-9", "similarity": 0.5}

        assert probe_field(match, ID_FIELDS) == "doc-9"
        assert probe_field(match, SCORE_FIELDS) == 0.5

    def test_first_candidate_wins(self):
        match = SimpleNamespace(_score=0.1, score=0.2, distance=0.3)
        assert probe_field(match, SCORE_FIELDS) == 0.1

    def test_none_values_are_skipped(self):
        match = {"_id": None, "id": "real-id"}
        assert probe_field(match, ID_FIELDS) == "real-id"

    def test_zero_score_is_present(self):
        assert probe_field({"score": 0.0}, SCORE_FIELDS) == 0.0

    def test_not_found(self):
        assert probe_field(SimpleNamespace(metadata={}), SCORE_FIELDS) == NOT_FOUND
        assert probe_field({}, ID_FIELDS) == NOT_FOUND


class TestMatchChunk:

    def test_chunk_present(self):
        assert match_chunk({"metadata": {"chunk": "BP 150/95"}}) == "BP 150/95"

    def test_chunk_missing(self):
        assert match_chunk({"metadata": {"source": "notes.pdf"}}) == NO_CHUNK_CONTENT

    def test_metadata_missing_or_malformed(self):
        assert match_chunk(QueryMatch(id="a", score=1.0)) == NO_CHUNK_CONTENT
        assert match_chunk({"metadata": "not a mapping"}) == NO_CHUNK_CONTENT


class TestRenderMatches:

    def test_no_matches(self):
        assert render_matches([]) == "<nomatches>"
        assert render_matches([]) == NO_MATCHES

    def test_single_match(self):
        matches = [QueryMatch(id="a", score=0.9, metadata={"chunk": "Elevated troponin"})]

        assert render_matches(matches) == "Clinical Finding 1: \n Elevated troponin"

    def test_multiple_matches_in_index_order(self):
        matches = [
            QueryMatch(id="a", score=0.9, metadata={"chunk": "C1"}),
            QueryMatch(id="b", score=0.8, metadata={"chunk": "C2"}),
            QueryMatch(id="c", score=0.7, metadata={"chunk": "C3"}),
        ]

        result = render_matches(matches)

        assert result == (
            "Clinical Finding 1: \n C1"
            ". \n\n"
            "Clinical Finding 2: \n C2"
            ". \n\n"
            "Clinical Finding 3: \n C3"
        )
        assert result.split(FINDING_SEPARATOR) == [
            "Clinical Finding 1: \n C1",
            "Clinical Finding 2: \n C2",
            "Clinical Finding 3: \n C3",
        ]

    def test_missing_chunk_uses_placeholder(self):
        matches = [
            {"id": "a", "metadata": {"chunk": "C1"}},
            {"id": "b", "metadata": {}},
        ]

        assert render_matches(matches) == (
            "Clinical Finding 1: \n C1. \n\nClinical Finding 2: \n No chunk content"
        )

    def test_non_string_chunk(self):
        assert render_matches([{"metadata": {"chunk": 42}}]) == "Clinical Finding 1: \n 42"


def test_log_matches_probes_each_chunk():
    matches = [
        {"_id": "a", "score": 0.9, "metadata": {"chunk": "C1"}},
        SimpleNamespace(metadata=None),
    ]

    with patch("evidence_retrieval.core.render.logger") as mock_logger:
        log_matches(matches)

    calls = mock_logger.log_chunk.call_args_list
    assert len(calls) == 2
    assert calls[0].args == (1, "a", 0.9, {"chunk": "C1"}, "C1")
    assert calls[1].args == (2, NOT_FOUND, NOT_FOUND, None, NO_CHUNK_CONTENT)


def test_log_matches_empty_is_silent():
    with patch("evidence_retrieval.core.render.logger") as mock_logger:
        log_matches([])

    mock_logger.log_chunk.assert_not_called()


def test_error_sentinel():
    assert error_sentinel(RuntimeError("quota exceeded")) == "<error: quota exceeded>"


@pytest.mark.parametrize("text,status", [
    ("<nomatches>", "no_matches"),
    ("<error: boom>", "error"),
    ("Clinical Finding 1: \n C1", "ok"),
])
def test_classify_answer(text, status):
    assert classify_answer(text) == status


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
