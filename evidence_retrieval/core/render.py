"""
Rendering of ranked vector matches into a numbered evidence blob.

Match objects come from different clients (Pinecone models, plain dicts, the
local index) and do not agree on field names, so id and score are probed
across candidate names. Only the metadata `chunk` text reaches the output.
"""

from collections.abc import Mapping
from typing import Any, Sequence

from util.logging import logger

NO_MATCHES = "<nomatches>"
NO_CHUNK_CONTENT = "No chunk content"
NOT_FOUND = "Not found"
FINDING_LABEL = "Clinical Finding"
# Glues ". " onto the end of each entry except the last
FINDING_SEPARATOR = ". \n\n"
ERROR_PREFIX = "<error:"

SCORE_FIELDS = ("_score", "score", "similarity", "distance")
ID_FIELDS = ("_id", "id", "documentId")


def _field(match, name: str):
    if isinstance(match, Mapping):
        return match.get(name)
    return getattr(match, name, None)


def probe_field(match, candidates: Sequence[str]) -> Any:
    """Return the value of the first candidate field present on the match.

    Works on attribute-style and mapping-style matches. Returns NOT_FOUND
    when no candidate is present.
    """
    for name in candidates:
        value = _field(match, name)
        if value is not None:
            return value
    return NOT_FOUND


def match_metadata(match) -> dict:
    metadata = _field(match, "metadata")
    if isinstance(metadata, Mapping):
        return metadata
    return {}


def match_chunk(match) -> str:
    """The source passage stored with the match, or a placeholder."""
    chunk = match_metadata(match).get("chunk")
    if chunk is None:
        return NO_CHUNK_CONTENT
    return str(chunk)


def format_finding(position: int, match) -> str:
    return f"{FINDING_LABEL} {position}: \n {match_chunk(match)}"


def render_matches(matches: Sequence) -> str:
    """
    Render matches in index order as numbered findings.

    Returns:
        NO_MATCHES for an empty sequence, otherwise the findings joined by
        FINDING_SEPARATOR
    """
    if not matches:
        return NO_MATCHES

    return FINDING_SEPARATOR.join(
        format_finding(position, match)
        for position, match in enumerate(matches, start=1)
    )


def log_matches(matches: Sequence) -> None:
    """Diagnostic dump of every fetched chunk."""
    if not matches:
        return

    logger.debug("=== FETCHED CHUNKS ===")
    for position, match in enumerate(matches, start=1):
        logger.log_chunk(
            position,
            probe_field(match, ID_FIELDS),
            probe_field(match, SCORE_FIELDS),
            _field(match, "metadata"),
            match_chunk(match)
        )
    logger.debug("=== END OF CHUNKS ===")


def error_sentinel(error: Exception) -> str:
    return f"<error: {error}>"


def classify_answer(text: str) -> str:
    """Map a formatted answer to ok | no_matches | error."""
    if text == NO_MATCHES:
        return "no_matches"
    if text.startswith(ERROR_PREFIX):
        return "error"
    return "ok"
