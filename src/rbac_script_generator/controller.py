from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable

from rbac_script_generator.core import generate_script
from rbac_script_generator.credentials import CredentialStore
from rbac_script_generator.errors import CredentialError, CredentialMissingError
from rbac_script_generator.models import AccessRequest

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "API Key is not set. Please set your API key."
INVALID_KEY_MESSAGE = "API Key is not valid. Please check your key and try again."
INTERRUPTED_MESSAGE = "Script generation was interrupted. Please try again."

Generate = Callable[[AccessRequest, str], str]


class GenerationState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class GenerationController:
    """
    Owns the transient state of one UI session and runs one generation at a time.

    idle/succeeded/failed --begin--> submitting --run--> succeeded | failed

    begin() and run() are separate so the UI can render the submitting state
    (submit button disabled) before the network call starts; submit() does
    both. Every generation error is turned into display text here. A rejected
    key is also cleared from the credential store, which sends the app back
    to the key entry page.
    """

    def __init__(self, store: CredentialStore, generate: Generate = generate_script) -> None:
        self.store = store
        self.generate = generate
        self.state = GenerationState.IDLE
        self.result = ""
        self.error: str | None = None
        self.last_request: AccessRequest | None = None
        self._pending_key: str | None = None
        self._lock = threading.Lock()
        self._unsubscribe = store.subscribe(self._on_credential_change)

    @property
    def is_submitting(self) -> bool:
        return self.state is GenerationState.SUBMITTING

    @property
    def needs_credential(self) -> bool:
        return self.store.get() is None

    def begin(self, request: AccessRequest) -> bool:
        """
        Accept a submission. Returns False (and changes nothing) while a
        generation is already in flight. Without a stored key the cycle fails
        right here and run() has nothing to do.
        """
        with self._lock:
            if self.is_submitting:
                logger.info("Submission ignored: a generation is already running")
                return False

            self.result = ""
            self.error = None
            self.last_request = request

            api_key = self.store.get()
            if not api_key:
                self._fail(CredentialMissingError(MISSING_KEY_MESSAGE), MISSING_KEY_MESSAGE)
                return True

            self._pending_key = api_key
            self.state = GenerationState.SUBMITTING
        return True

    def run(self) -> bool:
        """Perform the generation accepted by begin(). Returns False if there is none."""
        with self._lock:
            if not self.is_submitting or self._pending_key is None:
                return False
            request, api_key = self.last_request, self._pending_key
            self._pending_key = None

        try:
            script = self.generate(request, api_key)
        except CredentialError as e:
            self._fail(e, INVALID_KEY_MESSAGE)
            self.store.set(None)
        except Exception as e:
            self._fail(e, f"Failed to generate script: {e}")
        except BaseException as e:
            # script control flow / interrupts: leave a usable state, then let it through
            self._fail(e, INTERRUPTED_MESSAGE)
            raise
        else:
            self.result = script
            self.state = GenerationState.SUCCEEDED
            logger.info("Script generated (%d chars)", len(script))
        return True

    def submit(self, request: AccessRequest) -> bool:
        if not self.begin(request):
            return False
        self.run()
        return True

    def _on_credential_change(self, value: str | None) -> None:
        # a fresh key makes a previous key error stale
        if value is None or self.state is not GenerationState.FAILED:
            return
        if self.error in (MISSING_KEY_MESSAGE, INVALID_KEY_MESSAGE):
            logger.info("New API key stored; clearing previous key error")
            self.state = GenerationState.IDLE
            self.error = None

    def _fail(self, exc: BaseException, message: str) -> None:
        logger.error("Generation failed: %s: %s", type(exc).__name__, exc)
        self.error = message
        self.state = GenerationState.FAILED
