"""Command-line interface for sibilant."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import os
import sys
from datetime import datetime, timezone

from sibilant import __version__
from sibilant.alfred import script_filter, script_filter_error
from sibilant.app import EXIT_FAILURE, EXIT_OK, FAILURE_TITLE, ClipboardTranslator
from sibilant.clipboard import Clipboard
from sibilant.diagnostics import check_requirements
from sibilant.notify import NotificationStyle, SoundPlayer, build_notifier
from sibilant.settings import ConfigError, Settings, load_settings
from sibilant.translation.cloud import CloudProvider
from sibilant.translation.config import CloudProviderConfig
from sibilant.translation.errors import TranslationError

__all__ = ["build_parser", "main"]

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sibilant",
        description="Translate the clipboard contents and copy the result back.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-c", "--config", help="Path to the JSON configuration file")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    parser.set_defaults(
        func=_cmd_translate,
        provider=None,
        to=None,
        output="plain",
        notify=None,
        no_sound=False,
    )

    subparsers = parser.add_subparsers(dest="command")

    translate = subparsers.add_parser("translate", help="Translate the clipboard (default)")
    translate.add_argument("-p", "--provider", help="Provider id to use instead of the configured one")
    translate.add_argument("-t", "--to", help="Target language instead of the configured one")
    translate.add_argument(
        "-o",
        "--output",
        choices=("plain", "alfred"),
        default="plain",
        help="Print the translation as plain text or Alfred script-filter JSON",
    )
    translate.add_argument(
        "--notify",
        choices=[s.value for s in NotificationStyle],
        help="How to show the result (default: from configuration)",
    )
    translate.add_argument("--no-sound", action="store_true", help="Do not play sounds")
    translate.set_defaults(func=_cmd_translate)

    models = subparsers.add_parser("models", help="List models available to a cloud provider")
    models.add_argument("-p", "--provider", help="Cloud provider id (default: the configured one)")
    models.set_defaults(func=_cmd_models)

    doctor = subparsers.add_parser("doctor", help="Check the environment and configuration")
    doctor.set_defaults(func=_cmd_doctor)

    return parser


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = getattr(logging, os.environ.get("SIBILANT_LOG_LEVEL", "INFO").upper(), logging.INFO)
    # stdout is reserved for the translation / Alfred JSON.
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.quiet)
    return args.func(args)


def _apply_overrides(settings: Settings, provider: str | None, to: str | None) -> Settings:
    translation = settings.translation
    if provider:
        translation = dataclasses.replace(translation, provider=provider)
    if to:
        translation = dataclasses.replace(translation, target_language=to)
    return dataclasses.replace(settings, translation=translation)


def _cmd_translate(args: argparse.Namespace) -> int:
    clipboard = Clipboard()
    try:
        settings = _apply_overrides(load_settings(args.config), args.provider, args.to)
    except ConfigError as exc:
        logger.error("%s", exc)
        style = NotificationStyle(args.notify) if args.notify else NotificationStyle.DIALOG
        try:
            asyncio.run(build_notifier(style, copy_fn=clipboard.write).notify(FAILURE_TITLE, str(exc)))
        except Exception:
            logger.warning("Could not notify the user", exc_info=True)
        if args.output == "alfred":
            print(script_filter_error(str(exc)))
        return EXIT_FAILURE

    style = NotificationStyle(args.notify) if args.notify else settings.notifications.style
    listener = None if args.no_sound else SoundPlayer(settings.notifications.sounds)
    translator = ClipboardTranslator(
        settings=settings,
        clipboard=clipboard,
        notifier=build_notifier(style, copy_fn=clipboard.write),
        listener=listener,
    )
    exit_code = asyncio.run(translator.run())

    outcome = translator.outcome
    if args.output == "alfred":
        print(script_filter(outcome))
    elif outcome.ok:
        print(outcome.translation)
    else:
        print(f"Error: {outcome.message}", file=sys.stderr)
    return exit_code


def _cmd_models(args: argparse.Namespace) -> int:
    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    provider_id = args.provider or settings.translation.provider
    config = settings.providers.get(provider_id)
    if not isinstance(config, CloudProviderConfig):
        print(f"Error: '{provider_id}' is not a configured cloud provider", file=sys.stderr)
        return EXIT_FAILURE

    try:
        models = asyncio.run(_list_models(config))
    except TranslationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    print("Available models:")
    for model_id, created in models:
        created_date = datetime.fromtimestamp(created, tz=timezone.utc).date().isoformat()
        print(f"{model_id} (created: {created_date})")
    return EXIT_OK


async def _list_models(config: CloudProviderConfig) -> list[tuple[str, int]]:
    provider = CloudProvider(config)
    try:
        return await provider.list_models()
    finally:
        await provider.close()


def _cmd_doctor(args: argparse.Namespace) -> int:
    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        print(f"[ERROR] Configuration\n  {exc}")
        return EXIT_FAILURE

    issues = check_requirements(settings)
    if not issues:
        print(f"All requirements satisfied ({settings.source}).")
        return EXIT_OK

    for issue in issues:
        prefix = "[WARNING]" if issue.severity == "warning" else "[ERROR]"
        print(f"{prefix} {issue.title}\n  {issue.details}")
    return EXIT_FAILURE if any(i.severity == "error" for i in issues) else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
