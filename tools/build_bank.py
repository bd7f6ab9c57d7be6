#!/usr/bin/env python3
"""
build_bank.py - Validate and encrypt AIKEN question banks.

Usage with key file:
    python tools/build_bank.py --in bank.txt --out banks/bank.enc --key-file BANK.key

Usage with a freshly generated key file:
    python tools/build_bank.py --in bank.txt --out banks/bank.enc --new-key BANK.key

Usage with password:
    python tools/build_bank.py --in bank.txt --out banks/bank.enc --password
"""

import argparse
import getpass
import hashlib
import sys
from pathlib import Path
from cryptography.fernet import Fernet

sys.path.insert(0, str(Path(__file__).parent.parent))

from quizrunner.bank_loader import encrypt_bank_text
from quizrunner.parser import FormatError, parse


def generate_key(output_file: str) -> bytes:
    """Generate a new Fernet key and save it to file."""
    key = Fernet.generate_key()
    Path(output_file).parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, 'wb') as f:
        f.write(key)

    print(f"[OK] Encryption key generated: {output_file}")
    print(f"[!] SECURITY: Store this key securely. Never commit it to version control.")
    return key


def build_bank(in_file: str, out_file: str, key_file: str = None, use_password: bool = False,
               new_key_file: str = None) -> None:
    """Encrypt a plaintext AIKEN question bank after validating it."""
    try:
        with open(in_file, 'r', encoding='utf-8-sig') as f:
            text = f.read()

        # Refuse to encrypt a bank the runner would reject
        try:
            questions = parse(text)
        except FormatError as e:
            print(f"[ERROR] Invalid AIKEN bank ({e.kind}): {e.message}", file=sys.stderr)
            sys.exit(1)

        print(f"[OK] Input bank validated")
        print(f"  Questions: {len(questions)}")

        if use_password:
            password = getpass.getpass("Enter encryption password: ")
            password_confirm = getpass.getpass("Confirm password: ")

            if password != password_confirm:
                print("[ERROR] Passwords do not match", file=sys.stderr)
                sys.exit(1)

            if len(password) < 8:
                print("[ERROR] Password must be at least 8 characters", file=sys.stderr)
                sys.exit(1)

            final_data = encrypt_bank_text(text, password=password)
            print("[OK] Using password-based encryption")

        else:
            if new_key_file:
                key = generate_key(new_key_file)
            else:
                with open(key_file, 'rb') as f:
                    key = f.read().strip()
            final_data = encrypt_bank_text(text, key=key)
            print("[OK] Using key file encryption")

        sha256_hash = hashlib.sha256(final_data).hexdigest()

        Path(out_file).parent.mkdir(parents=True, exist_ok=True)
        with open(out_file, 'wb') as f:
            f.write(final_data)

        print(f"\n[OK] Success: Bank encrypted")
        print(f"  Input: {in_file} ({len(text.encode('utf-8'))} bytes)")
        print(f"  Output: {out_file} ({len(final_data)} bytes)")
        print(f"  Method: {'Password-based' if use_password else 'Key file'}")
        print(f"  SHA256: {sha256_hash}")

    except FileNotFoundError as e:
        print(f"[ERROR] File not found: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"[ERROR] Error encrypting bank: {e}", file=sys.stderr)
        sys.exit(1)


def main():
    parser = argparse.ArgumentParser(
        description="Validate and encrypt a plaintext AIKEN question bank.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python tools/build_bank.py --in bank.txt --out banks/bank.enc --key-file BANK.key
  python tools/build_bank.py --in bank.txt --out banks/bank.enc --new-key BANK.key
  python tools/build_bank.py --in bank.txt --out banks/bank.enc --password

Notes:
  - Input file must be a valid AIKEN bank
  - Output directory will be created if it doesn't exist
  - Produces SHA256 checksum for verification
        """
    )
    parser.add_argument(
        "--in",
        dest="in_file",
        required=True,
        help="Input plaintext AIKEN file"
    )
    parser.add_argument(
        "--out",
        required=True,
        help="Output encrypted bank file (.enc)"
    )
    method = parser.add_mutually_exclusive_group(required=True)
    method.add_argument(
        "--key-file",
        help="File containing the Fernet key"
    )
    method.add_argument(
        "--new-key",
        metavar="KEY_FILE",
        help="Generate a new Fernet key, save it here and encrypt with it"
    )
    method.add_argument(
        "--password",
        action="store_true",
        help="Use password-based encryption instead of a key file"
    )

    args = parser.parse_args()
    build_bank(args.in_file, args.out, args.key_file, args.password, args.new_key)


if __name__ == "__main__":
    main()
