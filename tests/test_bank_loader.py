"""
Tests for reading plain and encrypted bank files.
"""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from cryptography.fernet import Fernet

from quizrunner.bank_loader import (
    SALT_PREFIX, SALT_SIZE, BankLoadError,
    decrypt_bank_bytes, encrypt_bank_text, is_encrypted, is_password_based,
    load_bank_file, read_bank_text,
)
from quizrunner.parser import FormatError


BANK_TEXT = "What is 2+2?\nA. 3\nB. 4\nANSWER: B\n"


class TestPlainBanks:
    """Test loading unencrypted banks."""

    def test_read_text(self, tmp_path):
        path = tmp_path / "bank.txt"
        path.write_text(BANK_TEXT, encoding="utf-8")
        assert read_bank_text(path) == BANK_TEXT

    def test_byte_order_mark_stripped(self, tmp_path):
        path = tmp_path / "bank.txt"
        path.write_bytes(b"\xef\xbb\xbf" + BANK_TEXT.encode("utf-8"))
        assert read_bank_text(path) == BANK_TEXT

    def test_load_bank_file(self, tmp_path):
        path = tmp_path / "bank.txt"
        path.write_text(BANK_TEXT, encoding="utf-8")

        bank = load_bank_file(path)
        assert len(bank) == 1
        assert bank[0].answer_key == "B"

    def test_invalid_bank_raises_format_error(self, tmp_path):
        path = tmp_path / "bank.txt"
        path.write_text("What?\nA. one\nB. two\n", encoding="utf-8")
        with pytest.raises(FormatError):
            load_bank_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(BankLoadError, match="Cannot read"):
            read_bank_text(tmp_path / "nope.txt")

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "bank.txt"
        path.write_bytes(b"\xff\xfe\x00broken")
        with pytest.raises(BankLoadError, match="UTF-8"):
            read_bank_text(path)


class TestEncryptedBanks:
    """Test Fernet key and password protected banks."""

    def test_is_encrypted(self):
        assert is_encrypted(Path("bank.enc"))
        assert is_encrypted(Path("BANK.ENC"))
        assert not is_encrypted(Path("bank.txt"))

    def test_key_round_trip(self, tmp_path):
        key = Fernet.generate_key()
        path = tmp_path / "bank.enc"
        path.write_bytes(encrypt_bank_text(BANK_TEXT, key=key))

        assert read_bank_text(path, key.decode()) == BANK_TEXT

    def test_key_with_surrounding_whitespace(self):
        key = Fernet.generate_key()
        data = encrypt_bank_text(BANK_TEXT, key=key)
        assert decrypt_bank_bytes(data, f"  {key.decode()}\n") == BANK_TEXT

    def test_password_layout(self):
        data = encrypt_bank_text(BANK_TEXT, password="secret")
        assert is_password_based(data)
        assert data.startswith(SALT_PREFIX)
        assert len(data) > len(SALT_PREFIX) + SALT_SIZE

    def test_password_round_trip(self, tmp_path):
        path = tmp_path / "bank.enc"
        path.write_bytes(encrypt_bank_text(BANK_TEXT, password="secret"))

        bank = load_bank_file(path, "secret")
        assert bank[0].stem == "What is 2+2?"

    def test_wrong_password(self):
        data = encrypt_bank_text(BANK_TEXT, password="secret")
        with pytest.raises(BankLoadError, match="Decryption failed"):
            decrypt_bank_bytes(data, "guess")

    def test_wrong_key(self):
        data = encrypt_bank_text(BANK_TEXT, key=Fernet.generate_key())
        with pytest.raises(BankLoadError):
            decrypt_bank_bytes(data, Fernet.generate_key().decode())

    def test_malformed_key(self):
        data = encrypt_bank_text(BANK_TEXT, key=Fernet.generate_key())
        with pytest.raises(BankLoadError):
            decrypt_bank_bytes(data, "not-a-key")

    def test_missing_key(self, tmp_path):
        path = tmp_path / "bank.enc"
        path.write_bytes(encrypt_bank_text(BANK_TEXT, password="secret"))
        with pytest.raises(BankLoadError, match="encrypted"):
            read_bank_text(path)

    @pytest.mark.parametrize("kwargs", [{}, {"key": b"k", "password": "p"}])
    def test_exactly_one_secret(self, kwargs):
        with pytest.raises(ValueError):
            encrypt_bank_text(BANK_TEXT, **kwargs)
