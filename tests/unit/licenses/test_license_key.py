"""
Unit tests for LicenseKey value object.
"""

import hashlib
import re

import pytest

from licenses.domain.license_key import LicenseKey, generate_license_key, hash_license_key


class TestLicenseKey:
    """Tests for LicenseKey value object."""

    def test_generate_format(self):
        key = generate_license_key("LIC")
        assert re.fullmatch(r"LIC(-[A-Z0-9]{5}){5}", key)

    def test_generated_keys_differ(self):
        assert LicenseKey.generate("LIC").value != LicenseKey.generate("LIC").value

    def test_hash_and_hint(self):
        key = LicenseKey.generate("LIC")

        assert key.key_hash == hashlib.sha256(key.value.encode()).hexdigest()
        assert key.hint == key.value[-4:]
        assert str(key) == key.value

    def test_hash_ignores_surrounding_whitespace(self):
        assert hash_license_key("  LIC-AAAAA \n") == hash_license_key("LIC-AAAAA")

    def test_empty_key_rejected(self):
        with pytest.raises(ValueError, match="empty"):
            LicenseKey(value="  ", key_hash="0" * 64, hint="")

    def test_bad_hash_rejected(self):
        with pytest.raises(ValueError, match="hash"):
            LicenseKey(value="LIC-AAAAA", key_hash="abc", hint="AAAA")
