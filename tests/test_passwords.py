import pytest

from shapeless_blog.errors import CredentialVerificationError
from shapeless_blog.passwords import check_hasher, hash_password, verify_password


def test_hash_is_salted_and_verifiable():
    first = hash_password("secret1")
    second = hash_password("secret1")

    assert first != second
    assert first != "secret1"
    assert verify_password("secret1", first)
    assert verify_password("secret1", second)


def test_wrong_password_is_rejected():
    assert verify_password("nope", hash_password("secret1")) is False


@pytest.mark.parametrize("malformed", ["", "not-a-hash", "plain$text"])
def test_malformed_hash_raises(malformed):
    with pytest.raises(CredentialVerificationError):
        verify_password("secret1", malformed)


def test_unknown_method_raises():
    with pytest.raises(CredentialVerificationError):
        verify_password("secret1", "md5-ish$salt$abcdef")


def test_self_check_passes():
    check_hasher()
