import os
import sys
import tempfile
from datetime import timedelta
from pathlib import Path

import pytest

# Keep test runs away from the user's real log directory and console.
_LOG_DIR = Path(tempfile.mkdtemp(prefix="auth_state_test_logs_"))
os.environ.setdefault("AUTH_STATE_LOG_PATH", str(_LOG_DIR / "auth_state.log"))
os.environ.setdefault("AUTH_STATE_LOG_TO_CONSOLE", "false")


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


from auth_state.application.auth_state_service import AuthStateOptions, AuthStateService  # noqa: E402
from auth_state.domain.token_validation import TokenValidationService  # noqa: E402
from auth_state.infrastructure.token_storage import InMemoryTokenStore  # noqa: E402
from tests.token_helpers import FIXED_NOW, RecordingLogger, mint_token  # noqa: E402


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def validator() -> TokenValidationService:
    return TokenValidationService(clock=lambda: FIXED_NOW)


@pytest.fixture
def make_token():
    def _make(seconds_from_now: float | None, **claims) -> str:
        expires_at = None if seconds_from_now is None else FIXED_NOW + timedelta(seconds=seconds_from_now)
        return mint_token(expires_at, **claims)

    return _make


@pytest.fixture
def store() -> InMemoryTokenStore:
    return InMemoryTokenStore()


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def build_service(store, validator, recording_logger):
    def _build(*, offset: int = 0, encoding: str = "plain", token_store=None) -> AuthStateService:
        return AuthStateService(
            token_store if token_store is not None else store,
            options=AuthStateOptions(
                silent_renew_offset_in_seconds=offset,
                token_storage_encoding=encoding,
            ),
            token_validator=validator,
            logger=recording_logger,
        )

    return _build


@pytest.fixture
def service(build_service) -> AuthStateService:
    return build_service()
