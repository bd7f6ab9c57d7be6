"""
Question bank file loading.

Plain banks are UTF-8 AIKEN text. Encrypted banks (.enc) are Fernet tokens
over that text, either keyed directly with a Fernet key or derived from a
password, in which case the file starts with b'SALT' and a 16-byte salt.
"""

import base64
import os
from pathlib import Path
from typing import List, Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .models import Question
from .parser import parse


SALT_PREFIX = b'SALT'
SALT_SIZE = 16
ENCRYPTED_SUFFIX = '.enc'


class BankLoadError(ValueError):
    """The bank file could not be read or decrypted."""


def derive_key_from_password(password: str, salt: bytes) -> bytes:
    """Derive a Fernet key from a password using PBKDF2."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=480000,  # OWASP recommendation for 2024
    )
    key_material = kdf.derive(password.encode('utf-8'))
    return base64.urlsafe_b64encode(key_material)


def is_encrypted(path: Path) -> bool:
    return Path(path).suffix.lower() == ENCRYPTED_SUFFIX


def is_password_based(data: bytes) -> bool:
    return data.startswith(SALT_PREFIX)


def encrypt_bank_text(text: str, key: Optional[bytes] = None, password: Optional[str] = None) -> bytes:
    """
    Encrypt bank text with a Fernet key or a password.

    Password-based output is prefixed with b'SALT' and the random salt.
    """
    if (key is None) == (password is None):
        raise ValueError("Provide exactly one of key or password")

    salt = b''
    if password is not None:
        salt = os.urandom(SALT_SIZE)
        key = derive_key_from_password(password, salt)

    token = Fernet(key).encrypt(text.encode('utf-8'))
    return SALT_PREFIX + salt + token if salt else token


def decrypt_bank_bytes(data: bytes, key_input: str) -> str:
    """
    Decrypt an encrypted bank.

    Args:
        data: Raw .enc file contents
        key_input: Password for salted files, Fernet key otherwise

    Raises:
        BankLoadError: If the key/password is wrong or the data is corrupted
    """
    if is_password_based(data):
        salt = data[len(SALT_PREFIX):len(SALT_PREFIX) + SALT_SIZE]
        token = data[len(SALT_PREFIX) + SALT_SIZE:]
        key = derive_key_from_password(key_input, salt)
    else:
        token = data
        key = key_input.strip().encode('utf-8')

    try:
        plaintext = Fernet(key).decrypt(token)
    except (InvalidToken, ValueError) as e:
        raise BankLoadError("Decryption failed: invalid key/password or corrupted file") from e

    return plaintext.decode('utf-8-sig')


def read_bank_text(path: Path, key_input: Optional[str] = None) -> str:
    """Read a bank file as text, decrypting it when it is an .enc file."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise BankLoadError(f"Cannot read bank file '{path}': {e}") from e

    if is_encrypted(path):
        if not key_input:
            raise BankLoadError(f"Bank '{path.name}' is encrypted; a key or password is required")
        return decrypt_bank_bytes(data, key_input)

    try:
        return data.decode('utf-8-sig')
    except UnicodeDecodeError as e:
        raise BankLoadError(f"Bank '{path.name}' is not valid UTF-8 text: {e}") from e


def load_bank_file(path: Path, key_input: Optional[str] = None) -> List[Question]:
    """
    Read and parse a bank file.

    Raises:
        BankLoadError: If the file cannot be read or decrypted
        FormatError: If its contents are not valid AIKEN
    """
    return parse(read_bank_text(path, key_input))
