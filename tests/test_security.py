"""Unit tests for linkshare.core.security: bcrypt hashing and JWT encode/decode."""

import base64
import json
import unittest
from datetime import UTC, datetime, timedelta

import jwt

from linkshare.core.security import (
    _dummy_hash,
    create_access_token,
    decode_access_token,
    hash_password,
    prime_dummy_hash,
    verify_against_dummy,
    verify_password,
)
from helpers import make_settings


class TestPasswordHashing(unittest.TestCase):
    """hash_password is salted per call; verify_password only accepts the original."""

    def test_verify_accepts_original_password(self) -> None:
        digest = hash_password("password123", rounds=4)
        self.assertTrue(verify_password("password123", digest))

    def test_verify_rejects_other_password(self) -> None:
        digest = hash_password("password123", rounds=4)
        self.assertFalse(verify_password("password124", digest))
        self.assertFalse(verify_password("", digest))

    def test_same_password_gives_different_digests(self) -> None:
        self.assertNotEqual(hash_password("secret", rounds=4), hash_password("secret", rounds=4))

    def test_digest_is_not_the_plaintext(self) -> None:
        digest = hash_password("password123", rounds=4)
        self.assertNotIn("password123", digest)
        self.assertTrue(digest.startswith("$2"))

    def test_cost_parameter_is_recorded(self) -> None:
        self.assertIn("$05$", hash_password("pw", rounds=5))

    def test_malformed_digest_returns_false(self) -> None:
        self.assertFalse(verify_password("password123", "not-a-bcrypt-hash"))

    def test_long_password_verifies(self) -> None:
        long_pw = "x" * 128
        digest = hash_password(long_pw, rounds=4)
        self.assertTrue(verify_password(long_pw, digest))

    def test_bytes_past_72_still_matter(self) -> None:
        digest = hash_password("a" * 72 + "y", rounds=4)
        self.assertFalse(verify_password("a" * 72 + "x", digest))
        self.assertFalse(verify_password("a" * 72, digest))
        self.assertTrue(verify_password("a" * 72 + "y", digest))

    def test_multibyte_password_past_72_bytes(self) -> None:
        prefix = "é" * 36
        digest = hash_password(prefix + "one", rounds=4)
        self.assertFalse(verify_password(prefix + "two", digest))

    def test_dummy_verification_is_always_false(self) -> None:
        self.assertFalse(verify_against_dummy("linkshare-timing-equalizer", rounds=4))
        self.assertFalse(verify_against_dummy("anything", rounds=4))

    def test_primed_dummy_hash_is_reused_by_verification(self) -> None:
        _dummy_hash.cache_clear()
        prime_dummy_hash(4)
        before = _dummy_hash.cache_info()
        self.assertEqual(before.misses, 1)
        verify_against_dummy("anything", rounds=4)
        after = _dummy_hash.cache_info()
        self.assertEqual(after.misses, 1)
        self.assertEqual(after.hits, before.hits + 1)


class TestAccessToken(unittest.TestCase):
    """create_access_token embeds id, username, role and expiry; decode validates them."""

    def setUp(self) -> None:
        self.settings = make_settings(JWT_EXPIRE_MINUTES=30)

    def test_round_trip_claims(self) -> None:
        token, expires_at = create_access_token(self.settings, 7, "alice", "user")
        payload = decode_access_token(self.settings, token)
        self.assertEqual(payload["sub"], "7")
        self.assertEqual(payload["username"], "alice")
        self.assertEqual(payload["role"], "user")
        self.assertEqual(payload["exp"], int(expires_at.timestamp()))
        self.assertEqual(set(payload), {"sub", "username", "role", "iat", "exp"})

    def test_expiry_horizon_comes_from_settings(self) -> None:
        now = datetime.now(UTC)
        _, expires_at = create_access_token(self.settings, 1, "a", "user", now=now)
        self.assertEqual(expires_at - now, timedelta(minutes=30))

    def test_expired_token_raises(self) -> None:
        past = datetime.now(UTC) - timedelta(hours=2)
        token, _ = create_access_token(self.settings, 1, "alice", "user", now=past)
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_access_token(self.settings, token)

    def test_wrong_secret_raises(self) -> None:
        token, _ = create_access_token(self.settings, 1, "alice", "user")
        other = make_settings(JWT_SECRET="another-secret")
        with self.assertRaises(jwt.InvalidSignatureError):
            decode_access_token(other, token)

    def test_missing_claim_raises(self) -> None:
        token = jwt.encode(
            {"sub": "1", "role": "user", "iat": datetime.now(UTC), "exp": datetime.now(UTC) + timedelta(minutes=5)},
            self.settings.JWT_SECRET.get_secret_value(),
            algorithm="HS256",
        )
        with self.assertRaises(jwt.MissingRequiredClaimError):
            decode_access_token(self.settings, token)

    def test_tampered_payload_is_rejected(self) -> None:
        token, _ = create_access_token(self.settings, 2, "bob", "user")
        header, _, signature = token.split(".")
        forged_claims = json.dumps(
            {"sub": "2", "username": "bob", "role": "admin", "iat": 0, "exp": 9999999999}
        ).encode("utf-8")
        forged = base64.urlsafe_b64encode(forged_claims).rstrip(b"=").decode("ascii")
        with self.assertRaises(jwt.InvalidSignatureError):
            decode_access_token(self.settings, f"{header}.{forged}.{signature}")


if __name__ == "__main__":
    unittest.main()
