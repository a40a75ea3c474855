"""
Command-line entry point.
"""

import importlib
from unittest.mock import patch

import pytest

from scripts import query_index
from evidence_retrieval.core import config as config_module


def test_prints_findings_and_exits_zero(capsys):
    with patch.object(query_index, "retrieve_and_format", return_value="Clinical Finding 1: \n C1") as retrieve:
        code = query_index.main(["chest pain", "--index", "notes", "--namespace", "clinical", "-k", "3"])

    assert code == 0
    assert capsys.readouterr().out == "Clinical Finding 1: \n C1\n"
    retrieve.assert_called_once_with("chest pain", index_name="notes", namespace="clinical", top_k=3)


def test_no_matches_is_not_a_failure(capsys):
    with patch.object(query_index, "retrieve_and_format", return_value="<nomatches>"):
        code = query_index.main(["q", "--index", "notes"])

    assert code == 0
    assert "<nomatches>" in capsys.readouterr().out


def test_error_sentinel_exits_one(capsys):
    with patch.object(query_index, "retrieve_and_format", return_value="<error: unauthorized>"):
        code = query_index.main(["q", "--index", "notes"])

    assert code == 1
    assert "<error: unauthorized>" in capsys.readouterr().out


def test_missing_index(capsys):
    with patch.object(config_module, "PINECONE_INDEX_NAME", None):
        code = query_index.main(["q"])

    assert code == 1
    assert "No index configured" in capsys.readouterr().err


def test_import_does_not_load_dotenv():
    with patch("dotenv.load_dotenv") as load_dotenv:
        importlib.reload(query_index)

    load_dotenv.assert_not_called()


def test_invalid_top_k(capsys):
    assert query_index.main(["q", "--index", "notes", "--top-k", "0"]) == 1
    assert "--top-k" in capsys.readouterr().err


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
