"""Bradesco authentication CLI."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from bradesco_auth.assertion import create_assertion, resolve_audience
from bradesco_auth.credential import load_credential
from bradesco_auth.errors import SigningError
from bradesco_auth.request_signature import create_request_signature


def _add_credential_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--pfx", default=None, help="PKCS#12 bundle or PEM key (default: $BRADESCO_CERT_PATH)")
    parser.add_argument("--cert", default=None, help="PEM certificate paired with a PEM key")
    parser.add_argument("--password", default=None, help="Key password (default: $BRADESCO_CERT_PASSWORD)")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bradesco-auth", description="Bradesco API authentication helpers")
    parser.add_argument("--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)

    assertion_parser = subparsers.add_parser("assertion", help="Create a signed JWT bearer assertion")
    assertion_parser.add_argument("--client-id", required=True)
    assertion_parser.add_argument("--audience", default=None)
    assertion_parser.add_argument("--json", action="store_true")
    _add_credential_arguments(assertion_parser)

    signature_parser = subparsers.add_parser("signature", help="Create an X-Brad-Signature value")
    signature_parser.add_argument("--token", required=True)
    signature_parser.add_argument("--path", required=True)
    signature_parser.add_argument("--query", default="")
    body_group = signature_parser.add_mutually_exclusive_group()
    body_group.add_argument("--body", default=None)
    body_group.add_argument("--body-file", default=None)
    signature_parser.add_argument("--nonce", required=True, type=int)
    signature_parser.add_argument("--timestamp", required=True)
    signature_parser.add_argument("--json", action="store_true")
    _add_credential_arguments(signature_parser)

    return parser


def _read_body(args: argparse.Namespace) -> str:
    if args.body_file is not None:
        return Path(args.body_file).read_text(encoding="utf-8")
    return args.body or ""


def _run(args: argparse.Namespace) -> int:
    credential = load_credential(args.pfx, args.password, cert_path=args.cert)

    if args.command == "assertion":
        signed = create_assertion(args.client_id, credential, audience=resolve_audience(args.audience))
        if args.json:
            print(
                json.dumps(
                    {
                        "command": "assertion",
                        "assertion": signed.assertion,
                        "timestamp": signed.timestamp,
                        "issued_at": signed.issued_at,
                        "nonce": signed.nonce,
                        "expires_at": signed.expires_at,
                    },
                    sort_keys=True,
                )
            )
            return 0
        print(f"assertion: {signed.assertion}")
        print(f"timestamp: {signed.timestamp}")
        print(f"nonce: {signed.nonce}")
        print(f"expiresAt: {signed.expires_at}")
        return 0

    if args.command == "signature":
        signature = create_request_signature(
            bearer_token=args.token,
            timestamp=args.timestamp,
            request_path=args.path,
            query_parameters=args.query,
            request_body=_read_body(args),
            nonce=args.nonce,
            credential=credential,
        )
        if args.json:
            print(json.dumps({"command": "signature", "signature": signature}, sort_keys=True))
            return 0
        print(signature)
        return 0

    return 1


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        return _run(args)
    except (SigningError, ValueError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
