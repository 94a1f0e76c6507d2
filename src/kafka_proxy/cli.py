"""`kp`: command line access to a Kafka REST proxy.

Usage:
    kp --host http://localhost:8082 --format json get -t foo -p 1 --from 6 --count 10
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from .builders import consume_url
from .config import FORMAT_ENV_VAR, URL_ENV_VAR, ProxyConfig
from .consumer import consume
from .errors import ProxyError
from .models import Format
from .observability import logger
from .transport import RequestsTransport, Transport


def build_parser(config: ProxyConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kp", description="Kafka REST proxy client"
    )
    parser.add_argument(
        "--host",
        default=config.base_url,
        help=f"url to the kafka rest proxy (env {URL_ENV_VAR})",
    )
    parser.add_argument(
        "--format",
        default=config.format.value,
        choices=[f.value for f in Format],
        help=f"message format (env {FORMAT_ENV_VAR})",
    )
    parser.add_argument("--pretty", action="store_true", help="pretty print output")
    parser.add_argument("--verbose", action="store_true", help="be chatty")

    sub = parser.add_subparsers(dest="command", required=True)
    get = sub.add_parser(
        "get",
        help="read messages from a partition",
        description="kp get -p 1 -t foo --from 6 --count 10",
    )
    get.add_argument("-t", "--topic", required=True)
    get.add_argument(
        "-p", "--partition", type=int, default=0, help="partition to get from"
    )
    get.add_argument("--from", dest="offset", type=int, default=0)
    get.add_argument("--count", type=int, default=1)
    get.set_defaults(handler=_get)
    return parser


def _get(args: argparse.Namespace, transport: Transport) -> int:
    url = None
    try:
        url = consume_url(
            args.host, args.topic, args.partition, args.offset, args.count
        )
        messages = consume(
            transport,
            args.host,
            args.topic,
            args.partition,
            args.offset,
            args.count,
            args.format,
        )
    except ProxyError as e:
        print(f"kp: {e}", file=sys.stderr)
        if args.verbose and url:
            print(f"kp: url {url}", file=sys.stderr)
        return 1

    data = [m.model_dump(mode="json") for m in messages]
    print(json.dumps(data, indent=4 if args.pretty else None))
    return 0


def main(
    argv: Optional[List[str]] = None, transport: Optional[Transport] = None
) -> int:
    try:
        config = ProxyConfig.from_env()
    except ProxyError as e:
        print(f"kp: {e}", file=sys.stderr)
        return 2
    parser = build_parser(config)
    args = parser.parse_args(argv)

    if not args.host:
        parser.error(f"--host or {URL_ENV_VAR} is required")
    if args.verbose:
        logger.set_level(logging.DEBUG)

    transport = transport or RequestsTransport(timeout=config.request_timeout)
    try:
        return args.handler(args, transport)
    finally:
        transport.close()


if __name__ == "__main__":
    sys.exit(main())
