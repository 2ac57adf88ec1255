#!/usr/bin/env python3
"""Generate a 256-bit AES key for secretbox.

This script generates a cryptographically secure 32-byte key for use with
seal/open. The generated key should be stored as the AES_KEY environment
variable, or as the file AES_KEY in the secrets directory.

Usage:
    python scripts/generate_aes_key.py

Output:
    Prints the generated key, base64-encoded, ready to copy into the
    deployment's secret store.

Security Notes:
    - Generate a unique key per environment (staging, production)
    - Store only in the secret store, never in code
    - There is no key rotation: changing the key makes every existing
      sealed value unreadable
    - Keep a secure backup of production keys
"""

import base64

from secretbox.encryption import generate_key


def format_key(key: bytes) -> str:
    """Return the AES_KEY assignment line for ``key``."""
    return f"AES_KEY={base64.b64encode(key).decode()}"


def main() -> None:
    """Generate and display a new AES-256 key."""
    line = format_key(generate_key())

    print("=" * 60)
    print("Generated AES-256 Key")
    print("=" * 60)
    print()
    print("Add this to your environment or secret store:")
    print()
    print(line)
    print()
    print("-" * 60)
    print("Usage Instructions:")
    print("-" * 60)
    print("1. Copy the value after 'AES_KEY='")
    print("2. Set it as the AES_KEY environment variable, or")
    print("3. Write it to <SECRETS_DIR>/AES_KEY (default /run/secrets/AES_KEY)")
    print("4. Leave AES_KEY_ENCODING unset (base64 is the default)")
    print()
    print("IMPORTANT:")
    print("  - Never commit this key to version control")
    print("  - Keep a secure backup of production keys")
    print("  - Use different keys for staging and production")
    print("  - Replacing the key makes existing sealed data unreadable")
    print("=" * 60)


if __name__ == "__main__":
    main()
