import pytest

from rbac_script_generator.cleaning import strip_code_fences


def test_fenced_script_is_unwrapped():
    assert strip_code_fences("```bash\necho hello\n```") == "echo hello"


def test_surrounding_whitespace_is_trimmed():
    raw = "\n\n  ```powershell\nWrite-Host 'hi'\n$x = 1\n```  \n"
    assert strip_code_fences(raw) == "Write-Host 'hi'\n$x = 1"


def test_unfenced_text_is_only_trimmed():
    assert strip_code_fences("  kubectl get pods\n") == "kubectl get pods"


def test_missing_closing_fence():
    assert strip_code_fences("```bash\nset -e\necho ok") == "set -e\necho ok"


def test_closing_fence_on_last_code_line():
    assert strip_code_fences("```\necho ok```") == "echo ok"


@pytest.mark.parametrize("raw", ["```", "```bash", "", None])
def test_degenerate_input(raw):
    assert strip_code_fences(raw) == ""


@pytest.mark.parametrize(
    "raw",
    [
        "```bash\necho hello\n```",
        "```sh\n#!/usr/bin/env bash\nset -euo pipefail\n```\n",
        "```\nkubectl create sa temp\n```",
    ],
)
def test_no_fence_line_survives(raw):
    lines = strip_code_fences(raw).splitlines()
    assert not lines[0].startswith("```")
    assert not lines[-1].startswith("```")


def test_note_after_closing_fence_is_dropped():
    raw = "```bash\necho hi\n```\nThis script creates a user."
    assert strip_code_fences(raw) == "echo hi"


def test_cut_happens_at_last_fence():
    raw = "```bash\ncat <<'EOF'\n```inner```\nEOF\n```\n\nNote: run as admin."
    assert strip_code_fences(raw) == "cat <<'EOF'\n```inner```\nEOF"
