"""
Client entry point.

Loads configuration, configures logging, and runs one command against the
Org Todo server.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

import httpx
import structlog

from orgtodo_shared.schemas.common import ActionResult
from orgtodo_shared.schemas.invitations import InvitableRole

from .api import ClientError, OrgTodoClient
from .config import ClientConfig, load_config
from .metrics import MetricsCollector
from .onboarding import AuthStatus, OnboardingPoller, OnboardingSession


def configure_logging(level: str = "info", fmt: str = "json") -> None:
    """Configure structlog with the specified level and format."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            structlog.get_level_from_name(level)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _session_dict(session: OnboardingSession) -> dict[str, Any]:
    return {
        "state": session.state.value,
        "needs_onboarding": session.needs_onboarding,
        "degraded": session.degraded,
        "error": session.error,
    }


def _emit(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _emit_result(result: ActionResult) -> int:
    _emit(result.model_dump(mode="json"))
    return 0 if result.success else 1


def _poller_for(
    client: OrgTodoClient, config: ClientConfig, metrics: MetricsCollector
) -> OnboardingPoller:
    return OnboardingPoller(client.check_onboarding_status, config.onboarding, metrics=metrics)


async def cmd_status(
    client: OrgTodoClient, config: ClientConfig, args: argparse.Namespace, metrics: MetricsCollector
) -> int:
    poller = _poller_for(client, config, metrics)
    try:
        if config.server.token:
            session = await poller.check()
        else:
            session = await poller.on_auth_change(AuthStatus.UNAUTHENTICATED)
    finally:
        await poller.close()
    _emit(_session_dict(session) | {"should_show_onboarding": poller.should_show_onboarding})
    return 0 if session.error is None else 1


async def cmd_onboard(
    client: OrgTodoClient, config: ClientConfig, args: argparse.Namespace, metrics: MetricsCollector
) -> int:
    result = await client.create_user_organization(
        args.organization_name, first_name=args.first_name, last_name=args.last_name
    )
    if not result.success:
        return _emit_result(result)

    poller = _poller_for(client, config, metrics)
    try:
        session = await poller.complete_onboarding()
    finally:
        await poller.close()
    _emit({"result": result.model_dump(mode="json"), "session": _session_dict(session)})
    return 0


async def cmd_invite(
    client: OrgTodoClient, config: ClientConfig, args: argparse.Namespace, metrics: MetricsCollector
) -> int:
    result = await client.invite_user(args.email, args.organization_id, InvitableRole(args.role))
    return _emit_result(result)


async def cmd_accept(
    client: OrgTodoClient, config: ClientConfig, args: argparse.Namespace, metrics: MetricsCollector
) -> int:
    return _emit_result(await client.accept_invitation(args.invitation_token))


COMMANDS = {
    "status": cmd_status,
    "onboard": cmd_onboard,
    "invite": cmd_invite,
    "accept": cmd_accept,
}


async def main(
    config: ClientConfig,
    args: argparse.Namespace,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    log = structlog.get_logger()
    metrics = MetricsCollector()
    client = OrgTodoClient(
        base_url=config.server.url,
        token=config.server.token,
        verify_tls=config.server.verify_tls,
        request_timeout=config.server.request_timeout_seconds,
        transport=transport,
    )
    async with client:
        try:
            return await COMMANDS[args.command](client, config, args, metrics)
        except (ClientError, ValueError) as exc:
            log.error("client.command_failed", command=args.command, error=str(exc))
            return 2
        finally:
            if args.metrics:
                print(metrics.to_prometheus(), end="", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Org Todo command-line client")
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to configuration file (defaults are used when omitted)",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Print Prometheus counters to stderr when the command finishes",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Check whether onboarding is still needed")

    onboard = sub.add_parser("onboard", help="Create your organization")
    onboard.add_argument("organization_name")
    onboard.add_argument("--first-name", default=None)
    onboard.add_argument("--last-name", default=None)

    invite = sub.add_parser("invite", help="Invite someone to an organization")
    invite.add_argument("email")
    invite.add_argument("organization_id")
    invite.add_argument(
        "--role",
        choices=[r.value for r in InvitableRole],
        required=True,
    )

    accept = sub.add_parser("accept", help="Accept an invitation")
    accept.add_argument("invitation_token")
    return parser


def run() -> None:
    """CLI entry point for the client."""
    args = build_parser().parse_args()

    try:
        config = load_config(args.config) if args.config else ClientConfig()
    except FileNotFoundError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except Exception as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(1)

    configure_logging(config.logging.level, config.logging.format)

    try:
        sys.exit(asyncio.run(main(config, args)))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
