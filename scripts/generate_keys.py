"""
Script to generate the RS256 signing keypair for the auth service.
Usage: python scripts/generate_keys.py [--private-key PATH] [--public-key PATH] [--force]
"""

import argparse
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from authservice.core.security import RSA_KEY_SIZE, write_key_pair


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate an RSA keypair for JWT signing")
    parser.add_argument("--private-key", default="keys/jwt_private.pem", help="Private key output path")
    parser.add_argument("--public-key", default="keys/jwt_public.pem", help="Public key output path")
    parser.add_argument("--key-size", type=int, default=RSA_KEY_SIZE, help="RSA modulus size in bits")
    parser.add_argument("--force", action="store_true", help="Overwrite existing key files")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main function."""
    args = parse_args(argv)
    private_path = Path(args.private_key)
    public_path = Path(args.public_key)

    print("🔐 Auth Service Key Generator")
    print("=" * 50)

    existing = [p for p in (private_path, public_path) if p.exists()]
    if existing and not args.force:
        for path in existing:
            print(f"❌ {path} already exists (use --force to overwrite)")
        return 1

    if args.key_size < RSA_KEY_SIZE:
        print(f"❌ Key size must be at least {RSA_KEY_SIZE} bits")
        return 1

    private_path.parent.mkdir(parents=True, exist_ok=True)
    public_path.parent.mkdir(parents=True, exist_ok=True)
    write_key_pair(private_path, public_path, key_size=args.key_size)

    print(f"✅ Private key written to {private_path} (mode 0600)")
    print(f"✅ Public key written to {public_path}")
    print("\nAdd to your .env:")
    print(f'JWT_PRIVATE_KEY_PATH="{private_path}"')
    print(f'JWT_PUBLIC_KEY_PATH="{public_path}"')
    print("\n⚠️  IMPORTANT: Keep the private key secret and out of version control!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
