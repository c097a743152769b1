"""Encrypt, decrypt and inspect data from the command line.

Ciphertext is always read and written as hex. Keys are given as hex.

Examples:
	python scripts/cipher_tool.py encrypt --algorithm aes --mode cbc --key-hex 00..00 --data "hello"
	python scripts/cipher_tool.py decrypt --algorithm aes --mode cbc --key-hex 00..00 --data 3f9a...
	python scripts/cipher_tool.py der --r 1 --s 2
	python scripts/cipher_tool.py der --decode 3006020101020102
"""

import argparse
import logging
import sys

from cipherkit.common.config import load_settings
from cipherkit.common.errors import CipherkitError
from cipherkit.common.utils import hexd, hexe
from cipherkit.crypto.aes import AES_SPEC
from cipherkit.crypto.blowfish import BLOWFISH_SPEC
from cipherkit.crypto.chacha20 import CHACHA20_POLY1305_SPEC, CHACHA20_SPEC
from cipherkit.crypto.des import DES_SPEC, TRIPLE_DES_SPEC
from cipherkit.crypto.modes import CipherModeExecutor
from cipherkit.crypto.padding import get_padding, padding_names
from cipherkit.crypto.sign import decode_signature, encode_signature

SPECS = {
	"aes": AES_SPEC,
	"des": DES_SPEC,
	"3des": TRIPLE_DES_SPEC,
	"blowfish": BLOWFISH_SPEC,
	"chacha20": CHACHA20_SPEC,
	"chacha20-poly1305": CHACHA20_POLY1305_SPEC,
}


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(description="cipherkit command-line tool")
	parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
	sub = parser.add_subparsers(dest="command", required=True)

	for name in ("encrypt", "decrypt"):
		p = sub.add_parser(name, help=f"{name} data (hex ciphertext)")
		p.add_argument("--algorithm", choices=sorted(SPECS), default="aes")
		p.add_argument("--mode", default="cbc", help="ecb, cbc, cfb, ctr, ofb, gcm, aead or stream")
		p.add_argument("--padding", choices=padding_names(), default=None)
		p.add_argument("--key-hex", required=True, help="Key as hex")
		p.add_argument("--data", required=True, help="Plaintext (text) for encrypt, hex for decrypt")
		if name == "decrypt":
			p.add_argument("--hex-output", action="store_true", help="Print the plaintext as hex instead of UTF-8 text")

	p = sub.add_parser("der", help="Encode or decode a DER (r, s) signature")
	p.add_argument("--r", type=int)
	p.add_argument("--s", type=int)
	p.add_argument("--decode", help="DER signature as hex")
	return parser


def run(args) -> str:
	if args.command == "der":
		if args.decode:
			r, s = decode_signature(hexd(args.decode))
			return f"r={r}\ns={s}"
		return hexe(encode_signature(args.r, args.s)).decode("ascii")

	padding = get_padding(args.padding) if args.padding else None
	executor = CipherModeExecutor(SPECS[args.algorithm], args.mode, padding, encoding="hex")
	key = hexd(args.key_hex)
	if args.command == "encrypt":
		return executor.encrypt(key, args.data.encode("utf-8")).decode("ascii")
	plaintext = executor.decrypt(key, args.data)
	if args.hex_output:
		return hexe(plaintext).decode("ascii")
	try:
		return plaintext.decode("utf-8")
	except UnicodeDecodeError as e:
		raise ValueError("plaintext is not valid UTF-8, use --hex-output") from e


def main(argv=None) -> int:
	args = build_parser().parse_args(argv)
	settings = load_settings()
	logging.basicConfig(
		level=logging.DEBUG if args.verbose else getattr(logging, settings.log_level),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)
	try:
		print(run(args))
	except (CipherkitError, KeyError, ValueError) as e:
		print(f"error: {e}", file=sys.stderr)
		return 1
	return 0


if __name__ == "__main__":
	sys.exit(main())
