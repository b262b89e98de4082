from __future__ import annotations

import re
from dataclasses import dataclass

from rbac_script_generator.controller import GenerationController, GenerationState
from rbac_script_generator.models import AccessRequest, OutputOsType

PLACEHOLDER_TEXT = """\
// Your generated script will appear here...
# 1. Fill out the form on the left.
# 2. Click "Generate Script".
# 3. The executable script will be displayed in this panel.
# 4. Click the copy button to save it to your clipboard."""

LOADING_TEXT = "Generating script... this may take a moment."


@dataclass(frozen=True)
class OutputPanel:
    kind: str  # "placeholder" | "loading" | "error" | "script"
    text: str

    @property
    def copyable(self) -> bool:
        return self.kind == "script" and bool(self.text)


def output_panel(controller: GenerationController) -> OutputPanel:
    """What the output column shows for the controller's current state."""
    if controller.state is GenerationState.SUBMITTING:
        return OutputPanel("loading", LOADING_TEXT)
    if controller.state is GenerationState.FAILED and controller.error:
        return OutputPanel("error", controller.error)
    if controller.state is GenerationState.SUCCEEDED and controller.result:
        return OutputPanel("script", controller.result)
    return OutputPanel("placeholder", PLACEHOLDER_TEXT)


def code_language(output_os_type: OutputOsType) -> str:
    return "powershell" if OutputOsType(output_os_type) is OutputOsType.POWERSHELL else "bash"


def script_filename(request: AccessRequest | None) -> str:
    ext = ".sh"
    name = ""
    if request is not None:
        if request.output_os_type is OutputOsType.POWERSHELL:
            ext = ".ps1"
        name = request.principal_name.strip()

    # same rules as a safe download name: spaces -> _, keep letters, digits, . _ -
    name = re.sub(r"\s+", "_", name)
    name = re.sub(r"[^A-Za-z0-9._-]", "", name)
    return f"{name or 'access-script'}{ext}"
