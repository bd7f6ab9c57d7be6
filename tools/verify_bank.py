#!/usr/bin/env python3
"""
verify_bank.py - Validate an AIKEN question bank and decrypt it for inspection.

Usage with key file:
    python tools/verify_bank.py --bank banks/bank.enc --key-file BANK.key

Usage with password:
    python tools/verify_bank.py --bank banks/bank.enc --password

Usage with plaintext:
    python tools/verify_bank.py --bank bank.txt --json
"""

import argparse
import getpass
import json
import sys
from collections import Counter
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from quizrunner.bank_loader import BankLoadError, is_encrypted, is_password_based, read_bank_text
from quizrunner.parser import FormatError, parse


def verify_bank(bank_file: str, key_file: str = None, use_password: bool = False,
                as_json: bool = False) -> bool:
    """
    Verify a question bank (encrypted or plaintext).
    Returns True if valid, False otherwise.
    """
    path = Path(bank_file)
    key_input = None

    try:
        if is_encrypted(path):
            if not key_file and not use_password:
                print("[ERROR] Encrypted bank requires --key-file or --password", file=sys.stderr)
                return False

            if is_password_based(path.read_bytes()):
                if not use_password:
                    print("[ERROR] This bank was encrypted with a password. Use --password flag.", file=sys.stderr)
                    return False
                key_input = getpass.getpass("Enter decryption password: ")
            else:
                if not key_file:
                    print("[ERROR] This bank was encrypted with a key file. Use --key-file.", file=sys.stderr)
                    return False
                key_input = Path(key_file).read_text(encoding='utf-8').strip()

        text = read_bank_text(path, key_input)
        if key_input:
            print(f"[OK] Bank decrypted successfully")
    except (BankLoadError, OSError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return False

    try:
        questions = parse(text)
    except FormatError as e:
        print(f"[ERROR] Invalid AIKEN bank ({e.kind}): {e.message}", file=sys.stderr)
        return False

    if as_json:
        print(json.dumps([q.to_dict() for q in questions], ensure_ascii=False, indent=2))
        return True

    print(f"\n[SCHEMA] AIKEN Bank Validation")
    print(f"{'='*60}")
    print(f"[OK] Questions: {len(questions)}")

    warnings = []
    id_counts = Counter(q.id for q in questions)
    for qid, count in id_counts.items():
        if count > 1:
            warnings.append(f"{qid} appears {count} times (identical question repeated)")

    for q in questions:
        keys = q.option_keys()
        if len(set(keys)) != len(keys):
            warnings.append(f"{q.id}: repeated option letters {''.join(keys)}")

    option_counts = Counter(len(q.options) for q in questions)
    for n, count in sorted(option_counts.items()):
        print(f"  {count} question(s) with {n} options")

    answer_counts = Counter(q.answer_key for q in questions)
    print(f"  Answer distribution: " + ", ".join(f"{k}={v}" for k, v in sorted(answer_counts.items())))

    if warnings:
        print(f"\n[WARN] {len(warnings)} warning(s):")
        for warning in warnings:
            print(f"  - {warning}")

    print(f"\n[OK] Bank is valid")
    return True


def main():
    parser = argparse.ArgumentParser(
        description="Validate an AIKEN question bank (plaintext or encrypted).",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--bank", required=True, help="Bank file (.txt or .enc)")
    parser.add_argument("--key-file", help="File containing the Fernet key")
    parser.add_argument("--password", action="store_true", help="Decrypt with a password")
    parser.add_argument("--json", action="store_true", help="Print the parsed questions as JSON")

    args = parser.parse_args()
    ok = verify_bank(args.bank, args.key_file, args.password, args.json)
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
