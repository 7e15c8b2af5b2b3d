"""Tests for password hashing."""

import pytest

from app.errors import WeakPasswordError
from app.services.password import MAX_PASSWORD_BYTES, PasswordHasher, get_password_hasher


@pytest.fixture(name="hasher")
def hasher_fixture() -> PasswordHasher:
    return PasswordHasher(rounds=4)


class TestPasswordHasher:
    """Tests for the bcrypt wrapper."""

    def test_verify_accepts_original_password(self, hasher: PasswordHasher):
        digest = hasher.hash("Secret123!")
        assert hasher.verify("Secret123!", digest) is True

    @pytest.mark.parametrize("other", ["Secret123", "secret123!", "", "Secret123! "])
    def test_verify_rejects_other_passwords(self, hasher: PasswordHasher, other: str):
        digest = hasher.hash("Secret123!")
        assert hasher.verify(other, digest) is False

    def test_hash_is_salted(self, hasher: PasswordHasher):
        """The same password hashes differently every time."""
        assert hasher.hash("Secret123!") != hasher.hash("Secret123!")

    def test_hash_does_not_contain_plaintext(self, hasher: PasswordHasher):
        assert "Secret123!" not in hasher.hash("Secret123!")

    def test_cost_factor_is_recorded_in_digest(self, hasher: PasswordHasher):
        assert hasher.hash("Secret123!").startswith("$2b$04$")

    def test_malformed_digest_never_matches(self, hasher: PasswordHasher):
        assert hasher.verify("Secret123!", "not-a-bcrypt-hash") is False

    def test_unicode_password(self, hasher: PasswordHasher):
        digest = hasher.hash("heslo-žltý-kôň")
        assert hasher.verify("heslo-žltý-kôň", digest) is True
        assert hasher.verify("heslo-zlty-kon", digest) is False

    def test_default_rounds_come_from_settings(self):
        """The test run configures BCRYPT_ROUNDS=4."""
        assert get_password_hasher().rounds == 4

    def test_longest_hashable_password(self, hasher: PasswordHasher):
        password = "a" * MAX_PASSWORD_BYTES
        assert hasher.verify(password, hasher.hash(password)) is True

    @pytest.mark.parametrize("password", ["", "a" * 73, "ž" * 37])
    def test_rejects_passwords_bcrypt_cannot_hash(self, hasher: PasswordHasher, password: str):
        """The limit counts UTF-8 bytes, so 37 two-byte characters are too many."""
        with pytest.raises(WeakPasswordError):
            hasher.hash(password)

    def test_passwords_sharing_a_long_prefix_stay_distinct(self, hasher: PasswordHasher):
        digest = hasher.hash("a" * 71 + "b")
        assert hasher.verify("a" * 71 + "c", digest) is False
