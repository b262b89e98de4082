from types import SimpleNamespace

import pytest

from rbac_script_generator import core
from rbac_script_generator.errors import CommunicationError, CredentialError
from rbac_script_generator.llm import gemini_client
from rbac_script_generator.models import DEFAULT_REQUEST


class StubModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, model, contents):
        self.calls.append({"model": model, "contents": contents})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


def _install_stub(monkeypatch, models):
    keys = []

    def fake_get_client(api_key):
        keys.append(api_key)
        return SimpleNamespace(models=models)

    monkeypatch.setattr(gemini_client, "get_client", fake_get_client)
    return keys


def test_generate_text_returns_trimmed_text(monkeypatch):
    models = StubModels(text="  echo hi \n")
    keys = _install_stub(monkeypatch, models)

    assert gemini_client.generate_text("prompt", api_key=" key-123 ", model="m-1") == "echo hi"
    assert keys == ["key-123"]
    assert models.calls == [{"model": "m-1", "contents": "prompt"}]


def test_generate_text_handles_empty_response(monkeypatch):
    _install_stub(monkeypatch, StubModels(text=None))
    assert gemini_client.generate_text("prompt", api_key="key") == ""


@pytest.mark.parametrize("api_key", ["", "   ", None])
def test_blank_key_is_a_credential_error(monkeypatch, api_key):
    models = StubModels(text="never")
    _install_stub(monkeypatch, models)

    with pytest.raises(CredentialError):
        gemini_client.generate_text("prompt", api_key=api_key)
    assert models.calls == []


def test_rejected_key_is_a_credential_error(monkeypatch):
    error = RuntimeError("400 INVALID_ARGUMENT. API key not valid. Please pass a valid API key.")
    _install_stub(monkeypatch, StubModels(error=error))

    with pytest.raises(CredentialError) as excinfo:
        gemini_client.generate_text("prompt", api_key="bad")
    assert excinfo.value.__cause__ is error


def test_other_failures_are_communication_errors(monkeypatch):
    _install_stub(monkeypatch, StubModels(error=ConnectionError("connection reset")))

    with pytest.raises(CommunicationError) as excinfo:
        gemini_client.generate_text("prompt", api_key="key")
    assert "connection reset" in str(excinfo.value)


def test_is_invalid_key_error_ignores_case():
    assert gemini_client.is_invalid_key_error(ValueError("API KEY NOT VALID"))
    assert not gemini_client.is_invalid_key_error(ValueError("quota exceeded"))


def test_generate_script_scenario(monkeypatch):
    models = StubModels(text="```bash\necho hello\n```")
    _install_stub(monkeypatch, models)

    script = core.generate_script(DEFAULT_REQUEST, "key", model="gemini-2.5-flash")

    assert script == "echo hello"
    prompt = models.calls[0]["contents"]
    assert "Principal_Name: temp-user-01" in prompt
    assert "Target_API: Kubernetes RBAC" in prompt
    assert "Access_Type: Service_Account" in prompt


def test_unreadable_response_is_a_communication_error(monkeypatch):
    class BlockedResponse:
        @property
        def text(self):
            raise ValueError("response was blocked by safety filters")

    class BlockedModels:
        def generate_content(self, model, contents):
            return BlockedResponse()

    _install_stub(monkeypatch, BlockedModels())

    with pytest.raises(CommunicationError) as excinfo:
        gemini_client.generate_text("prompt", api_key="key")
    assert "blocked by safety filters" in str(excinfo.value)
