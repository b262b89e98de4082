from __future__ import annotations

FENCE = "```"


def strip_code_fences(raw: str) -> str:
    """
    Remove the markdown fence a model may wrap its answer in:
    - trim surrounding whitespace
    - if the text opens with ``` drop that first line (fence + language tag)
    - cut at the last ``` if present, dropping any note the model added after it
    Text that does not open with a fence is returned trimmed, otherwise untouched.
    """
    text = (raw or "").strip()
    if not text.startswith(FENCE):
        return text

    _, newline, body = text.partition("\n")
    if not newline:
        # a lone fence line has no interior
        return ""

    closing = body.rfind(FENCE)
    if closing != -1:
        body = body[:closing]

    return body.strip()
