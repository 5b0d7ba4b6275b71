"""
blockcrypt command-line front end.

Usage:
  blockcrypt encrypt --key <base64> --padding pkcs7 --in plain.txt --out blob.bin
  blockcrypt decrypt --key <base64> --padding pkcs7 --in blob.bin
  blockcrypt encrypt --base64 < plain.txt        (key etc. from BLOCKCRYPT_* / .env)
  blockcrypt ciphers | modes

Options that are not given fall back to the BLOCKCRYPT_* environment
variables (see blockcrypt.common.config).
"""

import argparse
import sys
from typing import List, Optional

from blockcrypt.common import utils
from blockcrypt.common.config import CipherConfig, PaddingType
from blockcrypt.common.errors import CryptError
from blockcrypt.crypto.pipeline import CryptPipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blockcrypt",
        description="Encrypt or decrypt data as an IV-prefixed block cipher blob."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("encrypt", "Encrypt plaintext into IV || ciphertext"),
        ("decrypt", "Decrypt an IV || ciphertext blob"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--cipher", help="Cipher name (e.g., 'rijndael-128')")
        p.add_argument("--mode", help="Block mode (e.g., 'cbc', 'ecb', 'ctr')")
        p.add_argument(
            "--padding",
            help="Padding type by name or number (e.g., 'pkcs7' or 2)"
        )
        p.add_argument("--key", help="Base64 encoded key")
        p.add_argument("--in", dest="infile", help="Input file (default: stdin)")
        p.add_argument("--out", dest="outfile", help="Output file (default: stdout)")
        p.add_argument(
            "--base64",
            action="store_true",
            help="Blob is base64 text (encrypt writes it, decrypt reads it)"
        )
        p.add_argument("--env-file", help="Path to a .env file with BLOCKCRYPT_* settings")

    sub.add_parser("ciphers", help="List supported ciphers")
    sub.add_parser("modes", help="List supported modes")
    return parser


def resolve_config(args: argparse.Namespace) -> CipherConfig:
    """Merges command-line options over the environment configuration."""
    config = CipherConfig.from_env(args.env_file)
    changes = {}
    if args.cipher:
        changes["cipher"] = args.cipher
    if args.mode:
        changes["mode"] = args.mode
    if args.padding is not None:
        changes["padding"] = PaddingType.parse(args.padding)
    if args.key:
        changes["key"] = utils.b64d(args.key)
    if not changes:
        return config
    return CipherConfig(**{**config.model_dump(), **changes})


def _read_input(path: Optional[str]) -> bytes:
    if path:
        with open(path, "rb") as f:
            return f.read()
    return sys.stdin.buffer.read()


def _write_output(path: Optional[str], data: bytes):
    if path:
        with open(path, "wb") as f:
            f.write(data)
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()


def run_crypt(args: argparse.Namespace) -> int:
    pipeline = CryptPipeline(resolve_config(args))
    data = _read_input(args.infile)

    if args.command == "encrypt":
        if args.base64:
            result = (pipeline.encrypt_base64(data) + "\n").encode("utf-8")
        else:
            result = pipeline.encrypt(data)
    else:
        if args.base64:
            result = pipeline.decrypt_base64(data.strip())
        else:
            result = pipeline.decrypt(data)

    _write_output(args.outfile, result)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and run the requested command."""
    args = build_parser().parse_args(argv)

    try:
        if args.command == "ciphers":
            for name in CryptPipeline().get_available_ciphers():
                print(name)
            return 0
        if args.command == "modes":
            for name in CryptPipeline().get_available_modes():
                print(name)
            return 0
        return run_crypt(args)
    except CryptError as e:
        print(f"[Error] {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        # Config validation (pydantic) and bad option values
        print(f"[Config Error] {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"[IO Error] {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
