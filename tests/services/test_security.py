from datetime import timedelta

from courtplanner.core import security


class TestTokens:

    def test_token_round_trip(self):
        token = security.create_access_token("Ann")
        assert security.decode_access_token(token).player_name == "Ann"

    def test_expired_token(self):
        token = security.create_access_token("Ann", expires_delta=timedelta(minutes=-1))
        assert security.decode_access_token(token) is None

    def test_garbage_token(self):
        assert security.decode_access_token("not-a-jwt") is None


class TestPasswords:

    def test_hash_and_verify(self):
        hashed = security.get_password_hash("Ann!2025")
        assert hashed != "Ann!2025"
        assert security.verify_password("Ann!2025", hashed)
        assert not security.verify_password("ann!2025", hashed)
