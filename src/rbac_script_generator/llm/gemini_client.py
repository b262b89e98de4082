from __future__ import annotations

import logging

import streamlit as st
from google import genai

from rbac_script_generator.errors import CommunicationError, CredentialError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

# Substring the API puts in its error message when the key is rejected.
INVALID_KEY_MARKER = "api key not valid"


@st.cache_resource
def get_client(api_key: str) -> genai.Client:
    """
    Create (once per key) a GenAI client for a user-supplied API key.
    """
    return genai.Client(api_key=api_key)


def is_invalid_key_error(exc: BaseException) -> bool:
    return INVALID_KEY_MARKER in str(exc).lower()


def generate_text(prompt: str, *, api_key: str, model: str = DEFAULT_MODEL) -> str:
    """
    Minimal wrapper: prompt -> text output.

    Raises CredentialError when the key is blank or rejected by the service,
    CommunicationError for every other failure. No retries.
    """
    api_key = (api_key or "").strip()
    if not api_key:
        raise CredentialError("API key is missing.")

    try:
        client = get_client(api_key)
        resp = client.models.generate_content(model=model, contents=prompt)
        # SDK returns a structured response; .text is the convenient plain string view
        text = resp.text or ""
    except Exception as e:
        if is_invalid_key_error(e):
            logger.warning("Gemini rejected the API key")
            raise CredentialError(str(e)) from e
        logger.error("Error calling Gemini API: %s", e)
        raise CommunicationError(f"Failed to communicate with the AI model: {e}") from e

    return text.strip()
