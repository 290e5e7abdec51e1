"""Locate a JSON array embedded in free-form model output.

Models tend to wrap the array in prose, markdown fences or citation markers
such as ``[1]``. Three scans are tried in order, each a fallback for the
previous one:

1. a fenced code block tagged ``json``;
2. the first ``[`` whose next non-whitespace character is ``{``, paired with
   the last ``]`` in the text;
3. the first ``[`` paired with the last ``]``.

Pairing with the last ``]`` is a heuristic: trailing citation brackets after
the real array widen the candidate and make it fail to decode.
"""

import re

FENCED_JSON_RE = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)


def fenced_block(raw: str) -> str | None:
    """Return the inner text of the first ```json fenced block, if any."""
    match = FENCED_JSON_RE.search(raw)
    if match is None:
        return None
    return match.group(1)


def object_array_start(raw: str) -> int:
    """Index of the first ``[`` that opens an array of objects, or -1."""
    for i, ch in enumerate(raw):
        if ch != "[":
            continue
        j = i + 1
        while j < len(raw) and raw[j].isspace():
            j += 1
        if j < len(raw) and raw[j] == "{":
            return i
    return -1


def bracket_span(raw: str) -> str | None:
    """Return the bracket-delimited candidate from scans 2 and 3."""
    end = raw.rfind("]")
    if end == -1:
        return None

    start = object_array_start(raw)
    if start != -1 and end > start:
        return raw[start : end + 1]

    start = raw.find("[")
    if start != -1 and end > start:
        return raw[start : end + 1]
    return None


def locate_payload(raw: str) -> str | None:
    """Find the candidate JSON array text in ``raw``.

    Returns:
        The candidate text, or None when nothing bracket-shaped was found.
        A fenced block wins even when its content is empty.
    """
    fenced = fenced_block(raw)
    if fenced is not None:
        return fenced
    return bracket_span(raw)
