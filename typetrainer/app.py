"""Application entry point and setup for the Type Trainer."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import textwrap
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from typetrainer.core.content import EmptyPromptsError, Split, load_prompts
from typetrainer.core.results import ResultStore
from typetrainer.core.session import SessionEngine, SessionSummary
from typetrainer.core.settings import ConfigError, Settings, data_dir, load_config_file
from typetrainer.ui.terminal import TerminalUI

logger = logging.getLogger(__name__)

# argparse destinations that override Settings fields.
_SETTING_DESTS = (
    "backspace_enabled",
    "blind_mode",
    "highlight_enabled",
    "auto_advance",
    "require_full_correctness",
    "repeat_on_mistake",
    "mistake_terminate_threshold",
    "time_limit",
    "prompt_mode",
)


def configure_logging(log_file: Optional[Path], verbose: bool = False) -> None:
    """Configure application-wide logging with a standard format.

    The terminal belongs to curses while a session runs, so records go to
    ``log_file`` when one can be opened.
    """
    kwargs: Dict[str, Any] = {}
    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            kwargs["filename"] = str(log_file)
        except OSError as e:
            # stderr belongs to curses once the session starts.
            print(f"Logging disabled: cannot create {log_file.parent}: {e}", file=sys.stderr)
            kwargs["handlers"] = [logging.NullHandler()]
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        **kwargs,
    )


def _int_at_least(minimum: int):
    def parse(value: str) -> int:
        try:
            number = int(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
        if number < minimum:
            raise argparse.ArgumentTypeError(f"must be at least {minimum}, got {number}")
        return number

    return parse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typetrainer",
        description="Practice typing the lines, words or text of a file in the terminal.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent(
            """
            Keys during a session:
              type to start or resume, Enter for the next prompt,
              Ctrl+P pause, Ctrl+R restart, Ctrl+C stop / quit, Esc quit
            """
        ).strip(),
    )
    parser.add_argument("path", type=Path, help="The path to the file you want to use for training")
    parser.add_argument("-s", "--start", type=_int_at_least(0), default=0,
                        help="Select the starting prompt of the exercise")
    parser.add_argument("-p", "--prompts", type=_int_at_least(1), default=None,
                        help="Limit the amount of prompts")
    parser.add_argument("-d", "--duration", dest="time_limit", type=_int_at_least(1), default=None,
                        metavar="SECONDS", help="Limit of the duration of the exercise in seconds")
    parser.add_argument("-t", "--terminate", dest="mistake_terminate_threshold", type=_int_at_least(1),
                        default=None, metavar="MISTAKES",
                        help="Terminate the exercise after the given amount of mistakes are made")
    parser.add_argument("--split", choices=[s.value for s in Split], default=None,
                        help="How to cut the file into prompts (default: lines)")
    parser.add_argument("-w", "--words", dest="split", action="store_const", const=Split.WORDS.value,
                        help="Split every word of the text into a separate prompt")
    parser.add_argument("-r", "--random", dest="prompt_mode", action="store_const", const="random",
                        default=None, help="Draw the prompts in a random order")
    parser.add_argument("-f", "--fixed", dest="backspace_enabled", action="store_const", const=False,
                        default=None, help="Disable the backspace")
    parser.add_argument("-b", "--blind", dest="blind_mode", action="store_const", const=True,
                        default=None, help="Hide the letters you type from the screen")
    parser.add_argument("-u", "--unmark", dest="highlight_enabled", action="store_const", const=False,
                        default=None, help="Disable the highlighting of correct letters and mistakes")
    parser.add_argument("-a", "--auto", dest="auto_advance", action="store_const", const=True,
                        default=None, help="Automatically progress to the next prompt without pressing enter")
    parser.add_argument("-c", "--correct", dest="require_full_correctness", action="store_const", const=True,
                        default=None, help="Only progress when the prompt is completely correct")
    parser.add_argument("-q", "--repeat", dest="repeat_on_mistake", action="store_const", const=True,
                        default=None, help="Repeat the prompt when a mistake was made while typing it")
    parser.add_argument("--config", type=Path, default=None,
                        help="Settings file in YAML (default: <data dir>/config.yaml)")
    parser.add_argument("--results", type=Path, default=None,
                        help="File the session results are appended to (default: <data dir>/results.jsonl)")
    parser.add_argument("--no-save", action="store_true", help="Do not save the session results")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages")
    return parser


def settings_from_args(args: argparse.Namespace, config: Dict[str, Any]) -> Settings:
    """Config file values first, then whatever was given on the command line."""
    settings = Settings.from_mapping(config)
    overrides = {dest: getattr(args, dest) for dest in _SETTING_DESTS if getattr(args, dest) is not None}
    return Settings.from_mapping(overrides, base=settings)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    home = data_dir()
    configure_logging(home / "typetrainer.log", verbose=args.verbose)

    try:
        config = load_config_file(args.config or home / "config.yaml")
        settings = settings_from_args(args, config)
        content = load_prompts(
            args.path,
            Split(args.split or Split.LINES.value),
            start=args.start,
            limit=args.prompts,
        )
    except EmptyPromptsError as e:
        print(f"cannot start: no prompts available ({e})", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        # ConfigError is a ValueError too.
        kind = "invalid configuration" if isinstance(e, ConfigError) else "could not read prompts"
        print(f"cannot start: {kind}: {e}", file=sys.stderr)
        return 1

    failed: List[SessionSummary] = []
    on_finish = None
    if not args.no_save:
        store = ResultStore(args.results or home / "results.jsonl")

        def on_finish(summary: SessionSummary) -> None:
            if not store.append(summary):
                failed.append(summary)

    engine = SessionEngine.from_content(content, settings, on_finish=on_finish)
    logger.info("Starting session with %d prompts", len(content.prompts))
    TerminalUI(engine).run()

    print(json.dumps(engine.summary().to_dict(), indent=2, ensure_ascii=False))
    if failed:
        print(f"Could not save {len(failed)} session result(s), see the log for details.", file=sys.stderr)
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
