"""
CLI entrypoint for the completekit library.

Examples:
    python -m completekit.cli providers --config settings.json
    python -m completekit.cli complete --config settings.json --model fast \\
        --system "Summarize" --content "Long text..." --stream
    python -m completekit.cli complete --testing --system "Fix grammar" --content "teh cat"
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config import Settings
from .exceptions import CompleteKitError
from .factory import ProviderFactory


def _load_settings(args: argparse.Namespace) -> Settings:
    settings = Settings.load(args.config) if args.config else Settings()
    if getattr(args, "testing", False):
        settings.testing_mode = True
    if getattr(args, "verbose", False):
        settings.debug_mode = True
    timeout = getattr(args, "timeout", None)
    if timeout is not None:
        settings.query_timeout = timeout
    return settings


def list_providers(settings: Settings) -> None:
    factory = ProviderFactory(settings)
    if not settings.models:
        print("No models configured.")
        return
    for model in settings.models:
        marker = "*" if model.id == settings.default_model_id else "-"
        print(f"{marker} {model.id}: {model.name} ({factory.provider_name(model.id)})")


def run_completion(args: argparse.Namespace, settings: Settings) -> Optional[str]:
    provider = ProviderFactory(settings).create(args.model)
    return asyncio.run(
        provider.complete_with_watchdog(
            args.system,
            args.content,
            on_chunk=_stream_printer if args.stream else None,
            temperature=args.temperature,
            max_output_tokens=args.max_tokens,
            user_prompt=args.user_prompt,
            streaming=args.stream,
            system_prompt_support=not args.no_system_role,
        )
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Provider-agnostic completion CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    providers_parser = subparsers.add_parser("providers", help="List configured models")
    providers_parser.add_argument("--config", help="Path to a JSON settings file")
    providers_parser.set_defaults(func="providers")

    complete_parser = subparsers.add_parser("complete", help="Run one completion")
    complete_parser.add_argument("--config", help="Path to a JSON settings file")
    complete_parser.add_argument("--model", help="Model id (defaults to the configured default)")
    complete_parser.add_argument("--system", required=True, help="System prompt")
    complete_parser.add_argument("--user-prompt", help="Optional secondary instruction")
    complete_parser.add_argument("--content", required=True, help="Content to process")
    complete_parser.add_argument("--temperature", type=float, help="Sampling temperature")
    complete_parser.add_argument("--max-tokens", type=int, help="Max output tokens")
    complete_parser.add_argument(
        "--stream", action="store_true", help="Stream provider output to stdout"
    )
    complete_parser.add_argument(
        "--no-system-role",
        action="store_true",
        help="Send the system prompt as a user message",
    )
    complete_parser.add_argument(
        "--timeout", type=float, help="Stall timeout in seconds (default: 45)"
    )
    complete_parser.add_argument(
        "--testing", action="store_true", help="Use the stub provider when resolution fails"
    )
    complete_parser.add_argument(
        "--verbose", action="store_true", help="Log request and response bodies"
    )
    complete_parser.set_defaults(func="complete")

    return parser


def _stream_printer(text: str) -> None:
    print(text, end="", flush=True)


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if getattr(args, "verbose", False):
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = _load_settings(args)
        if args.func == "providers":
            list_providers(settings)
        elif args.func == "complete":
            result = run_completion(args, settings)
            if args.stream:
                print()
            elif result is not None:
                print(result)
        else:
            parser.print_help()
    except CompleteKitError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
