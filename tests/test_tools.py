"""
Tests for the bank authoring tools.
"""

import json
import pytest
from pathlib import Path
from unittest.mock import patch

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent / "tools"))

from build_bank import build_bank
from verify_bank import verify_bank
from quizrunner.bank_loader import load_bank_file


BANK_TEXT = "What is 2+2?\nA. 3\nB. 4\nANSWER: B\n\nPick red:\nA. red\nB. blue\nANSWER: A\n"


@pytest.fixture
def bank_file(tmp_path):
    path = tmp_path / "bank.txt"
    path.write_text(BANK_TEXT, encoding="utf-8")
    return path


class TestBuildBank:
    """Test validating and encrypting banks."""

    def test_new_key(self, bank_file, tmp_path):
        key_file = tmp_path / "keys" / "BANK.key"
        out = tmp_path / "banks" / "bank.enc"
        build_bank(str(bank_file), str(out), new_key_file=str(key_file))

        key = key_file.read_text(encoding="utf-8")
        assert len(load_bank_file(out, key)) == 2

    def test_password(self, bank_file, tmp_path):
        out = tmp_path / "bank.enc"
        with patch("getpass.getpass", return_value="correct horse"):
            build_bank(str(bank_file), str(out), use_password=True)

        assert load_bank_file(out, "correct horse")[1].stem == "Pick red:"

    def test_short_password_rejected(self, bank_file, tmp_path):
        with patch("getpass.getpass", return_value="short"):
            with pytest.raises(SystemExit):
                build_bank(str(bank_file), str(tmp_path / "bank.enc"), use_password=True)

    def test_invalid_bank_not_encrypted(self, tmp_path):
        bad = tmp_path / "bad.txt"
        bad.write_text("What?\nA. one\n", encoding="utf-8")
        out = tmp_path / "bank.enc"

        with pytest.raises(SystemExit):
            build_bank(str(bad), str(out), new_key_file=str(tmp_path / "k.key"))
        assert not out.exists()


class TestVerifyBank:
    """Test bank inspection."""

    def test_plaintext(self, bank_file, capsys):
        assert verify_bank(str(bank_file)) is True
        assert "Questions: 2" in capsys.readouterr().out

    def test_json_output(self, bank_file, capsys):
        assert verify_bank(str(bank_file), as_json=True) is True
        data = json.loads(capsys.readouterr().out)
        assert [q["answer_key"] for q in data] == ["B", "A"]

    def test_key_file(self, bank_file, tmp_path):
        key_file = tmp_path / "BANK.key"
        out = tmp_path / "bank.enc"
        build_bank(str(bank_file), str(out), new_key_file=str(key_file))

        assert verify_bank(str(out), key_file=str(key_file)) is True

    def test_password_bank_needs_password_flag(self, bank_file, tmp_path):
        out = tmp_path / "bank.enc"
        with patch("getpass.getpass", return_value="correct horse"):
            build_bank(str(bank_file), str(out), use_password=True)

        assert verify_bank(str(out), key_file="unused.key") is False

    def test_duplicate_warning(self, tmp_path, capsys):
        path = tmp_path / "dup.txt"
        path.write_text(BANK_TEXT + "\n" + BANK_TEXT, encoding="utf-8")

        assert verify_bank(str(path)) is True
        assert "appears 2 times" in capsys.readouterr().out

    def test_invalid_bank(self, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text("A. orphan option\nB. another\nANSWER: A\n", encoding="utf-8")
        assert verify_bank(str(path)) is False
