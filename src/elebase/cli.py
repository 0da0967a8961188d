#!/usr/bin/env python3
from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from elebase.client import (
    ConfigValidationError,
    RequestError,
    RequestValidationError,
    Target,
    create_client,
)
from elebase.config import get_settings
from elebase.utils.logging_config import configure_logging

LOGGER = logging.getLogger(__name__)


def _parse_param(value: str) -> Tuple[str, str]:
    """Parse a `key=value` query parameter."""
    key, sep, item = value.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Invalid parameter '{value}'. Expected key=value")
    return key, item


def _parse_json_object(value: str) -> Dict[str, Any]:
    """Parse a JSON object given on the command line."""
    try:
        data = json.loads(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise argparse.ArgumentTypeError("Request data must be a JSON object")
    return data


def build_parser() -> argparse.ArgumentParser:
    """Build argument parser for the Elebase CLI."""
    parser = argparse.ArgumentParser(
        prog="elebase",
        description="Send one request to the Elebase API using ELEBASE_* settings.",
    )
    parser.add_argument(
        "method",
        type=str.upper,
        choices=["GET", "POST", "PUT", "DELETE"],
        help="HTTP method",
    )
    parser.add_argument("path", help="API endpoint path, e.g. /entries")
    parser.add_argument(
        "--target",
        choices=[target.value for target in Target],
        default=Target.API.value,
        help="Service to call (default: api)",
    )
    parser.add_argument(
        "--param",
        dest="params",
        type=_parse_param,
        action="append",
        default=[],
        help="Query parameter key=value (repeatable)",
    )
    parser.add_argument(
        "--data",
        type=_parse_json_object,
        help="JSON object request body (POST/PUT)",
    )
    parser.add_argument(
        "--locale",
        dest="locales",
        action="append",
        help="Locale code for Accept-Language (repeatable, overrides defaults)",
    )
    parser.add_argument("--user", help="User ID or authentication token")
    parser.add_argument(
        "--first",
        action="store_true",
        help="Return only the first item of a paged list",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log request/response diagnostics",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI.

    Returns:
        0 on success, 1 when the API reports an error, 2 on invalid
        configuration or request options.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        options = get_settings().client_options()
        if args.verbose:
            options["logging"] = True
        client = create_client(options, args.target)
    except (ValidationError, ConfigValidationError) as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        return 2

    params: Dict[str, List[str]] = {}
    for key, value in args.params:
        params.setdefault(key, []).append(value)

    with client:
        try:
            send = getattr(client, args.method.lower())
            response = send(
                args.path,
                data=args.data,
                params={key: values[0] if len(values) == 1 else values for key, values in params.items()},
                locales=args.locales,
                user=args.user,
                first=args.first,
            )
        except RequestValidationError as exc:
            LOGGER.error("Invalid request: %s", exc)
            return 2
        except RequestError as exc:
            print(json.dumps(_describe_error(exc), indent=2, default=str), file=sys.stderr)
            return 1

    print(json.dumps(response.data, indent=2, default=str))
    return 0


def _describe_error(exc: RequestError) -> Dict[str, Any]:
    fields = ("status", "id", "data", "code", "info", "type", "headers")
    return {name: getattr(exc, name) for name in fields if hasattr(exc, name)}


__all__ = ["build_parser", "main"]
