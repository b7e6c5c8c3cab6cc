# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Command line entry points.

Usage:
    student-hub serve
    student-hub issue-token admin@example.com --uid admin-1
"""

import argparse
import sys

import uvicorn

from student_hub.core.config import get_settings
from student_hub.domains.auth import IdentityProvider
from student_hub.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def serve(args: argparse.Namespace) -> int:
    settings = get_settings()
    setup_logging(settings)
    host = args.host or settings.api.host
    port = args.port or settings.api.port
    logger.info("Starting Student Hub server", host=host, port=port)
    uvicorn.run(
        "student_hub.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=settings.api.reload,
        log_config=None,
    )
    return 0


def issue_token(args: argparse.Namespace) -> int:
    """Print a signed identity token, for local development."""
    settings = get_settings()
    if settings.is_production:
        print("Refusing to issue tokens in production", file=sys.stderr)
        return 1
    provider = IdentityProvider(settings.identity)
    print(
        provider.issue_token(
            uid=args.uid or args.email,
            email=args.email,
            email_verified=not args.unverified,
            expires_minutes=args.minutes,
        )
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="student-hub")
    commands = parser.add_subparsers(dest="command", required=True)

    serve_cmd = commands.add_parser("serve", help="Run the API server")
    serve_cmd.add_argument("--host", default=None)
    serve_cmd.add_argument("--port", type=int, default=None)
    serve_cmd.set_defaults(handler=serve)

    token_cmd = commands.add_parser("issue-token", help="Issue a development token")
    token_cmd.add_argument("email")
    token_cmd.add_argument("--uid", default=None)
    token_cmd.add_argument("--minutes", type=int, default=None)
    token_cmd.add_argument("--unverified", action="store_true")
    token_cmd.set_defaults(handler=issue_token)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
