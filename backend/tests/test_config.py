"""
Notes Service — Configuration Tests
=====================================

What:  Signing-secret resolution and settings validation.
Why:   A missing secret must stop the service from starting, not silently fall
       back to a well-known key.
"""

import pytest

from notes_service.auth.tokens import verify_token
from notes_service.config import DEFAULT_DEV_JWT_SECRET, Settings
from notes_service.exceptions import ConfigurationError
from notes_service.main import create_app
from tests.conftest import encode_token


class TestSecretResolution:

    def test_configured_secret_is_used(self):
        config = Settings(jwt_secret="s3cret")
        assert config.resolve_jwt_secret() == b"s3cret"

    def test_missing_secret_is_fatal(self):
        config = Settings(jwt_secret="", allow_insecure_jwt_secret=False)
        with pytest.raises(ConfigurationError, match="JWT_SECRET is not set"):
            config.resolve_jwt_secret()

    def test_insecure_default_requires_opt_in(self):
        config = Settings(jwt_secret="", allow_insecure_jwt_secret=True)
        secret = config.resolve_jwt_secret()

        assert secret == DEFAULT_DEV_JWT_SECRET.encode("utf-8")
        token = encode_token({"user": "dev"}, secret=DEFAULT_DEV_JWT_SECRET)
        assert verify_token(token, secret) == {"user": "dev"}

    def test_create_app_refuses_to_start_without_secret(self):
        with pytest.raises(ConfigurationError):
            create_app(Settings(jwt_secret="", allow_insecure_jwt_secret=False))

    def test_create_app_wires_verifier_policy(self):
        app = create_app(Settings(jwt_secret="abc", jwt_require_exp=True, log_level="WARNING"))

        verifier = app.state.token_verifier
        assert verifier.require_exp is True
        assert verifier.verify(encode_token({"exp": 4102444800}, secret="abc")) is not None
        assert verifier.verify(encode_token({"user": "no-exp"}, secret="abc")) is None


class TestSettingsValidation:

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_log_level_rejected(self):
        with pytest.raises(ValueError):
            Settings(log_level="chatty")

    def test_cors_origins_split(self):
        config = Settings(cors_origins="http://a.test, http://b.test")
        assert config.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_sqlite_detection(self):
        assert Settings(database_url="sqlite+aiosqlite:///x.db").is_sqlite
        assert not Settings(database_url="postgresql+asyncpg://u:p@h/db").is_sqlite
