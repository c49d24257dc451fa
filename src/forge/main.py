#!/usr/bin/env python3
"""
Forge - a conversational coding agent

Usage:
    forge                                   interactive session
    forge "Fix the failing test in tests/"  one request, then exit
    forge --model openai/gpt-4.1 --working-dir ~/my-project
"""
# Suppress pydantic serialization warnings BEFORE any imports
import warnings

warnings.filterwarnings("ignore", message=".*Pydantic serializer warnings.*")
warnings.filterwarnings("ignore", message=".*PydanticSerializationUnexpectedValue.*")
warnings.filterwarnings("ignore", category=UserWarning, module="pydantic.*")

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from prompt_toolkit import prompt as pt_prompt

from .agent import Agent, AgentConfig
from .defaults import DEFAULT_MODEL, MAX_TURNS, MAX_RETRIES
from .display import Display
from .errors import ForgeError
from .startup import check_configuration_ready, show_key_help, show_startup_banner

EXIT_COMMANDS = ("exit", "quit")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="forge",
        description="Forge - a conversational coding agent",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Interactive session in the current directory
    forge

    # One request in another project
    forge --working-dir ~/my-project "Add a --verbose flag to cli.py"

    # Different model (any litellm model string)
    forge --model openai/gpt-4.1
""",
    )
    parser.add_argument(
        "request",
        nargs="?",
        help="Run a single request and exit (default: interactive session)",
    )
    parser.add_argument(
        "-m", "--model",
        default=None,
        help=f"Model to use (default: $FORGE_MODEL or {DEFAULT_MODEL})",
    )
    parser.add_argument(
        "-d", "--working-dir",
        default=None,
        help="Directory the tools operate in (default: current directory)",
    )
    parser.add_argument(
        "--max-turns",
        type=int,
        default=None,
        help=f"Planning calls per request (default: {MAX_TURNS})",
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        default=None,
        help=f"Recovery attempts per failure chain (default: {MAX_RETRIES})",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (errors only)",
    )
    return parser.parse_args(argv)


def run_interactive(agent: Agent, display: Display) -> None:
    """Read requests until exit/quit or end of input."""
    while True:
        try:
            text = pt_prompt("you> ")
        except (EOFError, KeyboardInterrupt):
            break

        text = text.strip()
        if not text:
            continue
        if text in EXIT_COMMANDS:
            display.success("Goodbye!")
            break

        print()
        try:
            agent.handle(text)
        except ForgeError as e:
            display.error(f"Error: {e}")
        print()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    load_dotenv()
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    working_dir = Path(args.working_dir or ".").expanduser().resolve()
    if not working_dir.is_dir():
        print(f"Error: Working directory not found: {working_dir}", file=sys.stderr)
        return 1

    config = AgentConfig.from_env(
        model=args.model,
        working_dir=str(working_dir),
        max_turns=args.max_turns,
        max_retries=args.max_retries,
        verbose=not args.quiet,
    )
    display = Display(verbose=config.verbose, quiet=not config.verbose)

    is_ready, issues = check_configuration_ready(config.model)
    if not is_ready:
        for issue in issues:
            display.error(issue)
        show_key_help(config.model)
        return 1

    agent = Agent(config=config, display=display)

    if args.request:
        try:
            agent.handle(args.request)
        except ForgeError as e:
            display.error(f"Error: {e}")
            return 1
        return 0

    display.info("Forging now...")
    show_startup_banner(config.model, working_dir, verbose=config.verbose)
    run_interactive(agent, display)
    return 0


if __name__ == "__main__":
    sys.exit(main())
