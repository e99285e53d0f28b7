"""
Tests for token issuance and bearer-token validation.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from auth.models import Identity
from auth.tokens import (
    JwtSettings,
    TokenIssuer,
    current_user_from_claims,
    decode_token,
)
from config.settings import ConfigurationError, Settings

KEY = "k" * 48


def _settings(**overrides) -> JwtSettings:
    values = dict(key=KEY, issuer="issuer-test", audience="audience-test", expires_minutes=60)
    values.update(overrides)
    return JwtSettings(**values)


def _raw_claims(token: str, settings: JwtSettings) -> dict:
    return jwt.decode(
        token,
        settings.key,
        algorithms=["HS256"],
        audience=settings.audience,
        issuer=settings.issuer,
    )


class TestJwtSettings:
    @pytest.mark.parametrize("key", ["", "   ", "short-key"])
    def test_rejects_unusable_keys(self, key):
        with pytest.raises(ConfigurationError):
            _settings(key=key)

    def test_rejects_non_positive_lifetime(self):
        with pytest.raises(ConfigurationError):
            _settings(expires_minutes=0)

    def test_from_settings(self):
        s = Settings(
            jwt_key=KEY,
            jwt_issuer="iss",
            jwt_audience="aud",
            jwt_expires_minutes=15,
        )
        js = JwtSettings.from_settings(s)
        assert js == JwtSettings(key=KEY, issuer="iss", audience="aud", expires_minutes=15)

    def test_from_settings_without_key(self):
        with pytest.raises(ConfigurationError):
            JwtSettings.from_settings(Settings(jwt_key=""))


class TestTokenIssuer:
    def test_claims_without_medico(self):
        settings = _settings()
        identity = Identity(id=7, correo="a@b.com", nombre_completo="A B", medico_id=None)
        before = datetime.now(timezone.utc)

        result = TokenIssuer(settings).issue(identity)

        assert result.token.count(".") == 2
        claims = _raw_claims(result.token, settings)
        assert claims["sub"] == "7"
        assert claims["email"] == "a@b.com"
        assert claims["name"] == "A B"
        assert claims["iss"] == "issuer-test"
        assert claims["aud"] == "audience-test"
        assert "medicoId" not in claims

        expected = before + timedelta(minutes=60)
        assert abs((result.expires_at - expected).total_seconds()) < 1
        assert abs(claims["exp"] - result.expires_at.timestamp()) < 1

    def test_claims_with_medico(self):
        settings = _settings()
        identity = Identity(id=3, correo="doc@clinic.mx", nombre_completo="Dr. J", medico_id=12)
        claims = _raw_claims(TokenIssuer(settings).issue(identity).token, settings)
        assert claims["medicoId"] == "12"

    def test_expiry_uses_configured_window(self):
        settings = _settings(expires_minutes=5)
        before = datetime.now(timezone.utc)
        result = TokenIssuer(settings).issue(Identity(id=1, correo="x@y.z", nombre_completo="X"))
        assert abs((result.expires_at - before).total_seconds() - 300) < 1
        assert result.expires_at.tzinfo is not None

    def test_none_identity_raises(self):
        with pytest.raises(ValueError):
            TokenIssuer(_settings()).issue(None)

    def test_header_is_hs256(self):
        token = TokenIssuer(_settings()).issue(Identity(id=1, correo="x@y.z", nombre_completo="X")).token
        assert jwt.get_unverified_header(token)["alg"] == "HS256"


class TestDecodeToken:
    def _token(self, settings=None, medico_id=None) -> str:
        settings = settings or _settings()
        identity = Identity(id=9, correo="p@q.r", nombre_completo="P Q", medico_id=medico_id)
        return TokenIssuer(settings).issue(identity).token

    def test_valid_token(self):
        settings = _settings()
        claims = decode_token(self._token(settings, medico_id=4), settings)
        user = current_user_from_claims(claims)
        assert user.id == 9
        assert user.correo == "p@q.r"
        assert user.nombre_completo == "P Q"
        assert user.medico_id == 4

    def test_wrong_audience(self):
        token = self._token(_settings(audience="other"))
        with pytest.raises(jwt.InvalidAudienceError):
            decode_token(token, _settings())

    def test_wrong_issuer(self):
        token = self._token(_settings(issuer="other"))
        with pytest.raises(jwt.InvalidIssuerError):
            decode_token(token, _settings())

    def test_wrong_key(self):
        token = self._token(_settings(key="z" * 48))
        with pytest.raises(jwt.InvalidSignatureError):
            decode_token(token, _settings())

    def test_expired_token(self):
        settings = _settings()
        past = datetime.now(timezone.utc) - timedelta(seconds=5)
        token = jwt.encode(
            {"sub": "1", "iss": settings.issuer, "aud": settings.audience, "exp": past},
            settings.key,
            algorithm="HS256",
        )
        with pytest.raises(jwt.ExpiredSignatureError):
            decode_token(token, settings)

    def test_missing_subject(self):
        settings = _settings()
        token = jwt.encode(
            {
                "iss": settings.issuer,
                "aud": settings.audience,
                "exp": datetime.now(timezone.utc) + timedelta(minutes=1),
            },
            settings.key,
            algorithm="HS256",
        )
        with pytest.raises(jwt.MissingRequiredClaimError):
            decode_token(token, settings)

    def test_garbage(self):
        with pytest.raises(jwt.InvalidTokenError):
            decode_token("not-a-token", _settings())

    def test_non_numeric_subject(self):
        with pytest.raises(jwt.InvalidTokenError):
            current_user_from_claims({"sub": "abc"})


def test_signing_key_is_hidden_from_repr():
    settings = _settings()
    assert KEY not in repr(settings)
    assert "issuer-test" in repr(settings)
    assert KEY not in repr(TokenIssuer(settings).settings)
