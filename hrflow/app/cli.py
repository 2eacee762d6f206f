"""Operator command-line interface for the HR automation workflows."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Callable, Sequence

from ..automation import attachment_from_file
from ..errors import HrflowError
from ..notifications import Level, Notification, RecordingNotifier
from ..reports import fetch_employees, onboarding_status, onboarding_summary, overview_counts
from ..security import SecretNotFoundError
from ..services import average_score, decision_label, decision_stats
from ..settings import ConfigError, load_config
from ..state import JobDraft
from ..utils.logging import configure_logging, get_logger
from .context import AppContext, build_context, default_secrets

LOGGER = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

Handler = Callable[[argparse.Namespace, AppContext], None]


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    handler: Handler | None = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(sys.stderr)
        return EXIT_USAGE

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ConfigError) as exc:
        configure_logging(structured=not args.log_plain)
        LOGGER.error("Cannot load configuration: %s", exc, extra={"event": "cli.config_error"})
        return EXIT_USAGE

    configure_logging(
        level=config.logging.level,
        structured=False if args.log_plain else config.logging.structured,
    )

    notifier = RecordingNotifier(listener=_print_notification)
    secrets = default_secrets(config.backend.secrets_file if config.backend else None)
    try:
        context = build_context(config, secrets, notifier)
        context.sign_in(secrets)
        # one-shot process: the profile upsert must finish before the store is shared
        context.sessions.wait_for_profile(config.backend.timeout)
    except (ConfigError, SecretNotFoundError) as exc:
        LOGGER.error("Missing configuration: %s", exc, extra={"event": "cli.config_error"})
        return EXIT_USAGE
    except HrflowError as exc:
        LOGGER.error("Sign in failed: %s", exc.message, extra={"event": "cli.sign_in_failed"})
        return EXIT_FAILED

    LOGGER.info("Running command", extra={"event": "cli.command", "command": args.command})
    try:
        handler(args, context)
    except HrflowError as exc:
        notifier.notify(Notification(Level.ERROR, exc.message))
    finally:
        context.sessions.sign_out()

    if any(n.level is Level.ERROR for n in notifier.history):
        return EXIT_FAILED
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hrflow", description="HR automation workflows")
    parser.add_argument("--config", help="Path to configuration file", default=None)
    parser.add_argument(
        "--log-plain",
        action="store_true",
        help="Use plain-text logs instead of JSON",
    )

    subparsers = parser.add_subparsers(dest="command")
    _add_screening_commands(subparsers)
    _add_candidate_commands(subparsers)
    _add_job_commands(subparsers)

    overview_parser = subparsers.add_parser("overview", help="Show dashboard totals")
    overview_parser.set_defaults(handler=_handle_overview)

    onboarding_parser = subparsers.add_parser("onboarding", help="Show onboarding progress and performance")
    onboarding_parser.set_defaults(handler=_handle_onboarding)
    return parser


def _add_screening_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    screening_parser = subparsers.add_parser("screening", help="Resume screening automation")
    screening_subparsers = screening_parser.add_subparsers(dest="screening_command", required=True)

    trigger_parser = screening_subparsers.add_parser("trigger", help="Trigger the screening workflow")
    trigger_parser.set_defaults(handler=_handle_screening_trigger)

    refresh_parser = screening_subparsers.add_parser(
        "refresh", help="Re-run screening and reload the candidate list"
    )
    refresh_parser.add_argument("--format", choices=("json", "table"), default="table")
    refresh_parser.set_defaults(handler=_handle_screening_refresh)


def _add_candidate_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    candidates_parser = subparsers.add_parser("candidates", help="AI-screened candidates")
    candidates_subparsers = candidates_parser.add_subparsers(dest="candidates_command", required=True)

    list_parser = candidates_subparsers.add_parser("list", help="List candidates by score")
    list_parser.add_argument("--format", choices=("json", "table"), default="table")
    list_parser.set_defaults(handler=_handle_candidates_list)


def _add_job_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    jobs_parser = subparsers.add_parser("jobs", help="Job postings")
    jobs_subparsers = jobs_parser.add_subparsers(dest="jobs_command", required=True)

    list_parser = jobs_subparsers.add_parser("list", help="List job postings")
    list_parser.set_defaults(handler=_handle_jobs_list)

    create_parser = jobs_subparsers.add_parser("create", help="Create a job posting")
    create_parser.add_argument("--title", required=True)
    create_parser.add_argument("--description", default="")
    create_parser.add_argument("--banner", type=Path, help="Banner image file")
    create_parser.add_argument(
        "--auto-share",
        action="store_true",
        help="Post the banner through the automation before saving",
    )
    create_parser.set_defaults(handler=_handle_jobs_create)

    share_parser = jobs_subparsers.add_parser("share", help="Share an existing job posting")
    share_parser.add_argument("job_id")
    share_parser.set_defaults(handler=_handle_jobs_share)


def _handle_screening_trigger(args: argparse.Namespace, context: AppContext) -> None:
    context.candidates.trigger_screening()


def _handle_screening_refresh(args: argparse.Namespace, context: AppContext) -> None:
    if context.candidates.refresh():
        _print_candidates(context, args.format)


def _handle_candidates_list(args: argparse.Namespace, context: AppContext) -> None:
    if context.candidates.load():
        _print_candidates(context, args.format)


def _handle_jobs_list(args: argparse.Namespace, context: AppContext) -> None:
    if not context.jobs.refresh():
        return
    jobs = context.jobs.jobs.items
    width = max((len(job.id) for job in jobs), default=2)
    print("ID".ljust(width), "Shared", "Banner", "Title", sep="  ")
    for job in jobs:
        shared = "yes" if job.posted_to_linkedin or job.posted_to_instagram else "no"
        banner = "yes" if job.has_banner else "no"
        print(job.id.ljust(width), shared.ljust(6), banner.ljust(6), job.title, sep="  ")


def _handle_jobs_create(args: argparse.Namespace, context: AppContext) -> None:
    banner = attachment_from_file(args.banner) if args.banner else None
    draft = JobDraft(
        title=args.title,
        description=args.description,
        banner=banner,
        auto_share=args.auto_share,
    )
    context.jobs.create_job(draft)


def _handle_jobs_share(args: argparse.Namespace, context: AppContext) -> None:
    if context.jobs.refresh():
        context.jobs.share_job(args.job_id)


def _handle_overview(args: argparse.Namespace, context: AppContext) -> None:
    user_id = context.user_id()
    if user_id is None:
        raise HrflowError("You must be signed in to view the overview")
    counts = overview_counts(context.store, user_id)
    print(json.dumps(asdict(counts), indent=2))


def _handle_onboarding(args: argparse.Namespace, context: AppContext) -> None:
    user_id = context.user_id()
    if user_id is None:
        raise HrflowError("You must be signed in to view onboarding")
    employees = fetch_employees(context.store, user_id)
    summary = onboarding_summary(employees)
    for employee in employees:
        score = employee.get("performance_score") or 0
        print(f"{employee.get('name', '')}  {score}/100  {onboarding_status(employee).replace('_', ' ')}")
    print(
        f"\n{summary.total} employees, {summary.completed} onboarded, "
        f"average performance {summary.average_performance}"
    )


def _print_candidates(context: AppContext, output_format: str) -> None:
    results = context.candidates.candidates.items
    if output_format == "json":
        payload = {
            "total": len(results),
            "average_score": average_score(results),
            "decisions": decision_stats(results),
            "candidates": [asdict(result) for result in results],
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    width = max((len(r.display_name) for r in results), default=4)
    print("Name".ljust(width), "Score", "Decision", sep="  ")
    for result in results:
        score = f"{result.overall_score or 0:g}%"
        print(result.display_name.ljust(width), score.ljust(5), decision_label(result.decision), sep="  ")
    print(f"\n{len(results)} reviewed, average score {average_score(results)}%")


def _print_notification(notification: Notification) -> None:
    stream = sys.stderr if notification.level is Level.ERROR else sys.stdout
    print(f"[{notification.level.value}] {notification.message}", file=stream)


__all__ = ["main"]
