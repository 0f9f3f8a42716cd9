"""
Operator command line for the verification service.

Each command prints the same JSON payload a transport layer would send back.
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from loguru import logger

from lawverify.api import handlers
from lawverify.app import VerificationApp
from lawverify.config.settings import Settings


def setup_logging(settings: Settings) -> None:
    """Configure loguru sinks."""
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL)
    if settings.LOG_FILE:
        logger.add(settings.LOG_FILE, level="DEBUG", rotation=settings.LOG_ROTATION, retention=1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lawverify", description="Lawyer credential verification")
    sub = parser.add_subparsers(dest="command", required=True)

    verify = sub.add_parser("verify", help="Verify a CNIC / letter ID pair")
    verify.add_argument("national_id")
    verify.add_argument("letter_id")

    sub.add_parser("pending", help="List pending verification requests")
    sub.add_parser("lawyers", help="List registry records")

    approve = sub.add_parser("approve", help="Approve a pending request")
    approve.add_argument("id")
    approve.add_argument("full_name")

    reject = sub.add_parser("reject", help="Reject a pending request")
    reject.add_argument("id")

    add = sub.add_parser("add-lawyer", help="Add a lawyer directly to the registry")
    add.add_argument("national_id")
    add.add_argument("letter_id")
    add.add_argument("full_name")

    return parser


async def run_command(app: VerificationApp, args: argparse.Namespace) -> handlers.ApiResponse:
    if args.command == "verify":
        return await handlers.verify_lawyer(
            app.verification, {"nationalId": args.national_id, "letterId": args.letter_id}
        )
    if args.command == "pending":
        return await handlers.list_verification_requests(app.review)
    if args.command == "lawyers":
        return await handlers.list_lawyers(app.review)
    if args.command == "approve":
        return await handlers.approve_verification(app.review, {"id": args.id, "fullName": args.full_name})
    if args.command == "reject":
        return await handlers.reject_verification(app.review, {"id": args.id})
    if args.command == "add-lawyer":
        return await handlers.add_lawyer(
            app.review,
            {"nationalId": args.national_id, "letterId": args.letter_id, "fullName": args.full_name},
        )
    raise ValueError(f"unknown command {args.command}")


async def _run(settings: Settings, args: argparse.Namespace) -> handlers.ApiResponse:
    async with VerificationApp(settings) as app:
        return await run_command(app, args)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings()
        setup_logging(settings)
        response = asyncio.run(_run(settings, args))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
        return 130
    except Exception as e:
        logger.critical(f"💥 Could not start the verification app: {e}")
        return 1

    print(json.dumps(response.body, indent=2, ensure_ascii=False))
    return 0 if response.ok else 1
