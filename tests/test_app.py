"""
Tests for application assembly and helper functions.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from config.settings import ConfigurationError, Settings
from database.helpers import normalize_email


class TestCreateApp:
    def test_blank_signing_key_is_fatal(self):
        from main import create_app

        with pytest.raises(ConfigurationError):
            create_app(Settings(jwt_key=""))

    def test_short_signing_key_is_fatal(self):
        from main import create_app

        with pytest.raises(ConfigurationError):
            create_app(Settings(jwt_key="too-short"))

    def test_issuer_is_attached_to_app(self, app):
        issuer = app.state.token_issuer
        assert issuer.settings.issuer == "consultorio-tests"
        assert issuer.settings.audience == "consultorio-tests-client"
        assert issuer.settings.expires_minutes == 60

    def test_request_id_is_echoed(self, client):
        resp = client.get("/", headers={"X-Request-ID": "abc-123"})
        assert resp.headers["x-request-id"] == "abc-123"
        assert "x-process-time" in resp.headers


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("A@B.com", "a@b.com"),
        ("  user@Clinic.MX \t", "user@clinic.mx"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_email(raw, expected):
    assert normalize_email(raw) == expected


class TestEnsureSeedAdmin:
    @staticmethod
    def _session_factory(session):
        factory = MagicMock()
        factory.return_value.__aenter__ = AsyncMock(return_value=session)
        factory.return_value.__aexit__ = AsyncMock(return_value=False)
        return factory

    @pytest.mark.asyncio
    async def test_hashes_in_threadpool_and_inserts(self):
        from database import helpers

        session = MagicMock()
        session.commit = AsyncMock()
        offload = AsyncMock(return_value="c2FsdA==.aGFzaA==")

        with patch.object(helpers, "async_session_factory", self._session_factory(session)), \
                patch.object(helpers, "find_usuario_by_correo", new=AsyncMock(return_value=None)), \
                patch.object(helpers, "run_in_threadpool", new=offload):
            created = await helpers.ensure_seed_admin(" Root@Clinic.MX ", "pw-root", "Root")

        assert created is True
        offload.assert_awaited_once_with(helpers.hash_password, "pw-root")
        usuario = session.add.call_args.args[0]
        assert usuario.correo == "root@clinic.mx"
        assert usuario.password_hash == "c2FsdA==.aGFzaA=="
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_existing_account_is_left_alone(self):
        from database import helpers

        session = MagicMock()
        offload = AsyncMock()

        with patch.object(helpers, "async_session_factory", self._session_factory(session)), \
                patch.object(helpers, "find_usuario_by_correo", new=AsyncMock(return_value=MagicMock())), \
                patch.object(helpers, "run_in_threadpool", new=offload):
            created = await helpers.ensure_seed_admin("root@clinic.mx", "pw-root", "Root")

        assert created is False
        offload.assert_not_awaited()
        session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_unconfigured_is_noop(self):
        from database import helpers

        assert await helpers.ensure_seed_admin(None, "pw", "Root") is False
        assert await helpers.ensure_seed_admin("root@clinic.mx", "", "Root") is False
