"""Command-line entry point.

Flags override the matching environment variables read by
``RedirectSettings.from_env()``.
"""

from __future__ import annotations

import argparse
import dataclasses
from typing import Mapping, Sequence

import uvicorn

from ..observability.logging import configure_logging
from .main import create_app
from .settings import RedirectSettings, normalize_consul_addr, parse_custom_routes


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Redirect Consul service hostnames to a live service port.",
    )
    parser.add_argument("--host", default="0.0.0.0", help="interface to bind")
    parser.add_argument("--port", type=int, help="http port")
    parser.add_argument(
        "--nomad-ui-hostname",
        help="the hostname to link to for viewing the Nomad UI",
    )
    parser.add_argument(
        "--consul-ui-hostname",
        help="the hostname to link to for viewing the Consul UI",
    )
    parser.add_argument(
        "--redirect-to-nomad-ui",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="redirect to the Nomad UI when given a hostname with the hostname suffix",
    )
    parser.add_argument("--hostname-suffix", help="the hostname suffix for nodes in the cluster")
    parser.add_argument(
        "--custom-routes",
        help="a JSON key-value map of custom routings based on hostname",
    )
    parser.add_argument("--consul-http-addr", help="Consul HTTP API address")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="root log level",
    )
    return parser.parse_args(argv)


def build_settings(
    args: argparse.Namespace,
    env: Mapping[str, str] | None = None,
) -> RedirectSettings:
    """Environment settings with any explicitly given flags applied on top."""
    settings = RedirectSettings.from_env(env)

    overrides: dict[str, object] = {}
    if args.port is not None:
        overrides["port"] = args.port
    if args.nomad_ui_hostname is not None:
        overrides["nomad_ui_hostname"] = args.nomad_ui_hostname
    if args.consul_ui_hostname is not None:
        overrides["consul_ui_hostname"] = args.consul_ui_hostname
    if args.redirect_to_nomad_ui is not None:
        overrides["redirect_to_nomad_ui"] = args.redirect_to_nomad_ui
    if args.hostname_suffix is not None:
        overrides["hostname_suffix"] = args.hostname_suffix
    if args.custom_routes is not None:
        overrides["custom_routes"] = parse_custom_routes(args.custom_routes)
    if args.consul_http_addr is not None:
        overrides["consul_http_addr"] = normalize_consul_addr(args.consul_http_addr)
    if args.log_level is not None:
        overrides["log_level"] = args.log_level

    return dataclasses.replace(settings, **overrides)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    settings = build_settings(args)
    app = create_app(settings)
    configure_logging(
        level=settings.log_level,
        json_output=settings.log_format == "json",
    )
    uvicorn.run(app, host=args.host, port=settings.port, log_config=None)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
