"""
newsletter-core CLI

Usage:
    newsletter-core signup https://example.com -f playwright
    newsletter-core compare https://example.com
    newsletter-core extract message.html
    newsletter-core email --temp
"""

import argparse
import asyncio
import json
import sys

from .automation import Framework, compare_frameworks, create_framework
from .config import Config
from .email_service import EmailService
from .error_handler import create_error_response
from .links import LinkExtractor
from .log_config import LogConfig, setup_logging


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_signup(args, cfg: Config) -> int:
    email = args.email or EmailService(cfg.email_domain).generate_email()
    framework = create_framework(args.framework, cfg)
    result = asyncio.run(framework.sign_up(args.url, email))
    _print_json(result.to_dict())
    return 0 if result.success else 1


def cmd_compare(args, cfg: Config) -> int:
    email = args.email or EmailService(cfg.email_domain).generate_email()
    comparison = asyncio.run(compare_frameworks(args.url, email, config=cfg))
    _print_json(comparison.to_dict())
    return 0


def cmd_extract(args, cfg: Config) -> int:
    if args.file and args.file != "-":
        with open(args.file, "r", encoding="utf-8", errors="replace") as f:
            content = f.read()
    else:
        content = sys.stdin.read()
    links = asyncio.run(LinkExtractor.from_config(cfg).extract_links(content))
    _print_json([link.to_dict() for link in links])
    return 0


def cmd_email(args, cfg: Config) -> int:
    service = EmailService(cfg.email_domain)
    print(service.generate_temp_email() if args.temp else service.generate_email())
    return 0


COMMANDS = {
    "signup": cmd_signup,
    "compare": cmd_compare,
    "extract": cmd_extract,
    "email": cmd_email,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="newsletter-core",
        description="Newsletter signup automation and email link extraction"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    signup_parser = subparsers.add_parser("signup", help="Sign up to a newsletter")
    signup_parser.add_argument("url", help="Page with the signup form")
    signup_parser.add_argument("-f", "--framework", default=Framework.PLAYWRIGHT.value,
                               choices=[f.value for f in Framework],
                               help="Automation backend")
    signup_parser.add_argument("-e", "--email", help="Address to subscribe (generated if omitted)")

    compare_parser = subparsers.add_parser("compare", help="Run every backend against one URL")
    compare_parser.add_argument("url", help="Page with the signup form")
    compare_parser.add_argument("-e", "--email", help="Address to subscribe (generated if omitted)")

    extract_parser = subparsers.add_parser("extract", help="Extract links from email content")
    extract_parser.add_argument("file", nargs="?", help="HTML or text file (stdin if omitted)")

    email_parser = subparsers.add_parser("email", help="Generate a disposable address")
    email_parser.add_argument("--temp", action="store_true", help="Generate a test address")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cfg = Config.from_env()
    log_config = LogConfig.from_env()
    if args.debug or cfg.debug:
        log_config.log_level = "DEBUG"
    setup_logging(log_config)

    try:
        return COMMANDS[args.command](args, cfg)
    except Exception as e:
        _print_json(create_error_response(e, include_stacktrace=args.debug))
        return 1


if __name__ == "__main__":
    sys.exit(main())
