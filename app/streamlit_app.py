from __future__ import annotations

import logging

import streamlit as st

from rbac_script_generator.config import Settings, configure_logging, load_settings
from rbac_script_generator.controller import GenerationController
from rbac_script_generator.core import generate_script
from rbac_script_generator.credentials import FileCredentialStore
from rbac_script_generator.errors import ValidationError
from rbac_script_generator.models import (
    DEFAULT_REQUEST,
    MAX_DURATION_HOURS,
    MIN_DURATION_HOURS,
    OUTPUT_OS_TYPE_LABELS,
    TARGET_API_LABELS,
    AccessRequest,
    access_type_label,
    access_type_options,
    default_access_type,
)
from rbac_script_generator.view import code_language, output_panel, script_filename

API_KEY_DOCS_URL = "https://ai.google.dev/gemini-api/docs/api-key"

logger = logging.getLogger("rbac_script_generator.app")


@st.cache_resource
def _settings() -> Settings:
    settings = load_settings()
    configure_logging(settings.log_level)
    return settings


def _init_state(settings: Settings) -> None:
    """
    Initialize Streamlit session state.

    Streamlit reruns the script on every user interaction, so the controller,
    the credential store and the form values live in st.session_state.
    Each browser session gets its own store instance over the shared file.
    """
    if "controller" not in st.session_state:
        store = FileCredentialStore(settings.storage_path, key=settings.storage_key)
        st.session_state.controller = GenerationController(
            store,
            generate=lambda request, api_key: generate_script(request, api_key, model=settings.model),
        )

    # Form defaults, set once so user edits survive reruns
    defaults = {
        "target_api": DEFAULT_REQUEST.target_api,
        "access_type": DEFAULT_REQUEST.access_type,
        "principal_name": DEFAULT_REQUEST.principal_name,
        "required_permissions": DEFAULT_REQUEST.required_permissions,
        "duration_hours": DEFAULT_REQUEST.duration_hours,
        "output_os_type": DEFAULT_REQUEST.output_os_type,
        "target_environment": DEFAULT_REQUEST.target_environment,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def _on_target_api_change() -> None:
    # Reset the access type to the first valid choice of the new platform
    st.session_state.access_type = default_access_type(st.session_state.target_api)


def _render_api_key_page(controller: GenerationController) -> None:
    st.title("🔑 Enter Your Gemini API Key")
    st.write(
        "To use the RBAC Script Generator, please provide your Google Gemini API key. "
        "Your key will be stored in local storage on this machine."
    )
    if controller.error:
        st.error(controller.error)

    with st.form("api_key_form"):
        api_key = st.text_input("Gemini API Key", type="password", placeholder="Enter your API key here")
        saved = st.form_submit_button("Save and Continue", type="primary", use_container_width=True)

    if saved:
        if api_key.strip():
            controller.store.set(api_key)
            st.rerun()
        else:
            st.warning("Please enter an API key.")

    st.markdown(f"[How to get an API key]({API_KEY_DOCS_URL})")


def _render_form(controller: GenerationController) -> AccessRequest | None:
    st.subheader("Access Request Details")

    col_api, col_type = st.columns(2)
    with col_api:
        # Outside the form: changing the platform must refresh the access type options immediately
        st.selectbox(
            "Target API",
            options=list(TARGET_API_LABELS.keys()),
            format_func=lambda k: TARGET_API_LABELS[k],
            key="target_api",
            on_change=_on_target_api_change,
        )
    target_api = st.session_state.target_api
    options = access_type_options(target_api)
    if st.session_state.access_type not in options:
        st.session_state.access_type = options[0]
    with col_type:
        st.selectbox(
            "Access Type",
            options=options,
            format_func=lambda k: access_type_label(target_api, k),
            key="access_type",
        )

    with st.form("generator_form"):
        st.text_input("Principal Name", key="principal_name")
        st.text_input("Required Permissions (comma-separated)", key="required_permissions")

        col_duration, col_os = st.columns(2)
        with col_duration:
            st.number_input(
                "Duration (Hours)",
                min_value=MIN_DURATION_HOURS,
                max_value=MAX_DURATION_HOURS,
                step=1,
                key="duration_hours",
            )
        with col_os:
            st.selectbox(
                "Output OS / Shell",
                options=list(OUTPUT_OS_TYPE_LABELS.keys()),
                format_func=lambda k: OUTPUT_OS_TYPE_LABELS[k],
                key="output_os_type",
            )

        st.text_input("Target Environment (e.g., cluster name, region)", key="target_environment")

        submitted = st.form_submit_button(
            "Generate Script",
            type="primary",
            use_container_width=True,
            disabled=controller.is_submitting,
        )

    if not submitted:
        return None

    try:
        return AccessRequest(
            target_api=st.session_state.target_api,
            access_type=st.session_state.access_type,
            principal_name=st.session_state.principal_name.strip(),
            required_permissions=st.session_state.required_permissions.strip(),
            duration_hours=int(st.session_state.duration_hours),
            output_os_type=st.session_state.output_os_type,
            target_environment=st.session_state.target_environment.strip(),
        )
    except ValidationError as e:
        st.warning(str(e))
        return None


def _render_output(controller: GenerationController) -> None:
    panel = output_panel(controller)
    st.subheader("Generated Script")

    if panel.kind == "error":
        st.error(panel.text)
        return
    if panel.kind == "loading":
        st.info(panel.text)
        return

    request = controller.last_request
    language = code_language(request.output_os_type) if request else "bash"
    # st.code renders its own copy-to-clipboard button
    st.code(panel.text, language=language)

    if panel.copyable:
        st.download_button(
            "⬇️ Download script",
            data=panel.text.encode("utf-8"),
            file_name=script_filename(request),
            mime="text/plain",
            use_container_width=True,
        )


def main() -> None:
    """
    Main Streamlit application entry point.

    Re-executed on every interaction. Without a stored key only the key entry
    page is shown; otherwise the request form and the output panel.
    """
    st.set_page_config(page_title="RBAC Script Generator", layout="wide")

    settings = _settings()
    _init_state(settings)
    controller: GenerationController = st.session_state.controller

    if controller.needs_credential:
        _render_api_key_page(controller)
        return

    with st.sidebar:
        st.header("⚙️ Settings")
        st.caption(f"Model: {settings.model}")
        if st.button("Clear API key", use_container_width=True):
            controller.store.set(None)
            logger.info("API key cleared by user")
            st.rerun()

    # Header
    st.title("🖥️ RBAC Script Generator")
    st.caption(
        "Instantly generate secure, temporary access scripts for your infrastructure. "
        "Fill out the form below to get started."
    )

    col_left, col_right = st.columns(2, vertical_alignment="top")

    with col_left:
        request = _render_form(controller)

    if request is not None and controller.begin(request):
        # rerun first so the form is drawn with the submit button disabled
        st.rerun()

    with col_right:
        if controller.is_submitting:
            with st.spinner("Generating script... this may take a moment."):
                controller.run()
            # redraw with the button enabled again (or the key page if the key was rejected)
            st.rerun()
        _render_output(controller)


if __name__ == "__main__":
    main()
