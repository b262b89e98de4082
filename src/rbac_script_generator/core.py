from __future__ import annotations

import logging

from rbac_script_generator.cleaning import strip_code_fences
from rbac_script_generator.llm.gemini_client import DEFAULT_MODEL, generate_text
from rbac_script_generator.llm.prompts import build_prompt
from rbac_script_generator.models import AccessRequest

logger = logging.getLogger(__name__)


def generate_script(
    request: AccessRequest,
    api_key: str,
    *,
    model: str = DEFAULT_MODEL,
) -> str:
    """
    AccessRequest + API key -> executable script text.

    The model answer is trimmed and unwrapped from a markdown code fence.
    Errors from the client (CredentialError / CommunicationError) propagate.
    """
    prompt = build_prompt(request)
    logger.info(
        "Generating %s script for %s (%s)",
        request.output_os_type.value,
        request.target_api.value,
        model,
    )

    raw = generate_text(prompt, api_key=api_key, model=model)
    return strip_code_fences(raw)
