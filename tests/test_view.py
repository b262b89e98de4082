from rbac_script_generator.controller import GenerationController, GenerationState
from rbac_script_generator.credentials import MemoryCredentialStore
from rbac_script_generator.models import DEFAULT_REQUEST, OutputOsType
from rbac_script_generator.view import (
    LOADING_TEXT,
    PLACEHOLDER_TEXT,
    code_language,
    output_panel,
    script_filename,
)


def _controller(script="echo hello", error=None):
    def generate(request, api_key):
        if error is not None:
            raise error
        return script

    return GenerationController(MemoryCredentialStore("key"), generate=generate)


def test_placeholder_before_any_submission():
    panel = output_panel(_controller())

    assert panel.kind == "placeholder"
    assert panel.text == PLACEHOLDER_TEXT
    assert not panel.copyable


def test_loading_while_submitting():
    controller = _controller()
    controller.state = GenerationState.SUBMITTING

    assert output_panel(controller).kind == "loading"
    assert output_panel(controller).text == LOADING_TEXT


def test_script_after_success():
    controller = _controller(script="echo hello")
    controller.submit(DEFAULT_REQUEST)
    panel = output_panel(controller)

    assert panel.kind == "script"
    assert panel.text == "echo hello"
    assert panel.copyable


def test_error_after_failure():
    controller = _controller(error=RuntimeError("down"))
    controller.submit(DEFAULT_REQUEST)
    panel = output_panel(controller)

    assert panel.kind == "error"
    assert panel.text == "Failed to generate script: down"


def test_empty_script_shows_placeholder():
    controller = _controller(script="")
    controller.submit(DEFAULT_REQUEST)

    assert output_panel(controller).kind == "placeholder"


def test_code_language():
    assert code_language(OutputOsType.BASH) == "bash"
    assert code_language(OutputOsType.POWERSHELL) == "powershell"


def test_script_filename():
    assert script_filename(DEFAULT_REQUEST) == "temp-user-01.sh"

    ps = DEFAULT_REQUEST.__class__(
        target_api=DEFAULT_REQUEST.target_api,
        access_type=DEFAULT_REQUEST.access_type,
        principal_name="ops team/₀1",
        required_permissions=DEFAULT_REQUEST.required_permissions,
        duration_hours=2,
        output_os_type=OutputOsType.POWERSHELL,
        target_environment="prod",
    )
    assert script_filename(ps) == "ops_team1.ps1"
    assert script_filename(None) == "access-script.sh"
