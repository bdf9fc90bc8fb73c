from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .adapters.factory import get_llm_adapter
from .errors import ScriptAlchemistError
from .models import AppStep
from .monitoring import configure_logging, get_collector
from .script_generator import ScriptService
from .settings import KNOWN_KEYS, SettingsStore, load_provider_config
from .views import LOADING_MESSAGES, render_analysis, render_step_indicator, save_script
from .workflow import ScriptWizard, phase_for_step

# Will be configured on startup
logger: logging.Logger = logging.getLogger("scriptalchemist")


def _read_transcript(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _is_interactive() -> bool:
    return sys.stdin.isatty()


def _build_service(args: argparse.Namespace, store: SettingsStore) -> ScriptService:
    config = load_provider_config(store, provider=args.provider, model=args.model)
    adapter = get_llm_adapter(config)
    strict = args.strict or store.get_bool("analysis_strict")
    return ScriptService(adapter, strict=strict)


def _status(message: str) -> None:
    print(message, file=sys.stderr)


def _on_step(step: AppStep) -> None:
    _status(render_step_indicator(phase_for_step(step)))
    if step in LOADING_MESSAGES:
        _status(LOADING_MESSAGES[step])


def _ask(prompt: str) -> str:
    try:
        return input(prompt)
    except EOFError:
        return ""


def cmd_run(args: argparse.Namespace, store: SettingsStore) -> int:
    service = _build_service(args, store)
    wizard = ScriptWizard(service, on_step_change=_on_step)
    wizard.transcript = _read_transcript(args.transcript)
    interactive = _is_interactive() and args.transcript != "-"
    topic_from_args = args.topic

    while True:
        if wizard.step == AppStep.INPUT_TRANSCRIPT:
            if not wizard.run_analysis():
                if wizard.error is None:
                    _status("Transcript is empty; nothing to analyze.")
                    return 1
                _status(f"Error: {wizard.error}")
                if interactive and _ask("Retry analysis? [y/N] ").strip().lower() == "y":
                    continue
                return 1

        elif wizard.step == AppStep.REVIEW_ANALYSIS:
            print(render_analysis(wizard.analysis))
            if not topic_from_args and not interactive:
                _status("No --topic given; stopping after the analysis.")
                return 0
            if not topic_from_args:
                choice = _ask("[c]ontinue to topic / [b]ack to transcript / [q]uit: ").strip().lower()
                if choice == "q":
                    return 0
                if choice == "b":
                    wizard.back_to_transcript()
                    new_path = _ask("Path to a new transcript (blank to analyze the same one again): ").strip()
                    if new_path:
                        wizard.transcript = _read_transcript(new_path)
                    continue
            wizard.proceed_to_topic()

        elif wizard.step == AppStep.INPUT_TOPIC:
            if topic_from_args:
                wizard.topic, topic_from_args = topic_from_args, None
            else:
                wizard.topic = _ask("New video topic (blank to review the analysis again, 'q' to quit): ").strip()
                if wizard.topic.lower() == "q":
                    return 0
                if not wizard.topic:
                    wizard.back_to_analysis()
                    continue
            if not wizard.run_generation():
                _status(f"Error: {wizard.error}")
                if not interactive:
                    return 1

        elif wizard.step == AppStep.RESULT:
            print(wizard.generated_script)
            if args.out:
                path = save_script(wizard.generated_script, wizard.topic, args.out)
                _status(f"Script saved to {path}")
            if interactive and _ask("Start over with a new transcript? [y/N] ").strip().lower() == "y":
                wizard.reset()
                wizard.transcript = _ask("Path to the next transcript: ").strip()
                if not wizard.transcript:
                    return 0
                wizard.transcript = _read_transcript(wizard.transcript)
                continue
            return 0

        else:
            # ANALYZING/GENERATING only exist while a call is outstanding
            raise RuntimeError(f"Wizard stopped in transient step {wizard.step.name}")


def cmd_analyze(args: argparse.Namespace, store: SettingsStore) -> int:
    service = _build_service(args, store)
    analysis = service.analyze_transcript(_read_transcript(args.transcript))
    if args.json:
        print(json.dumps(analysis.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(render_analysis(analysis))
    return 0


def cmd_config(args: argparse.Namespace, store: SettingsStore) -> int:
    if args.action == "show":
        values = store.as_dict(masked=True)
        print(f"# {store.path}")
        for key in KNOWN_KEYS:
            if key in values:
                print(f"{key}: {values[key]}")
        return 0
    if args.action == "set":
        if args.value is None:
            _status("config set requires KEY and VALUE")
            return 2
        store.set(args.key, args.value)
        return 0
    if args.action == "unset":
        if not store.unset(args.key):
            _status(f"{args.key} was not set in {store.path}")
        return 0
    return 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="scriptalchemist",
        description="Analyze the style of a video transcript and write a new script in that style",
    )
    p.add_argument("--settings", help="Settings file (default: ~/.scriptalchemist/settings.yaml)", default=None)
    p.add_argument("--log-dir", help="Directory for the log file", default=None)
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging and a telemetry summary")
    sub = p.add_subparsers(dest="command", required=True)

    def add_provider_args(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("transcript", help="Transcript file, or - for stdin")
        sp.add_argument("--provider", help="Provider override (openai|anthropic|gemini|custom|genai)", default=None)
        sp.add_argument("--model", help="Model override", default=None)
        sp.add_argument("--strict", action="store_true", help="Reject analyses missing required fields")

    run_p = sub.add_parser("run", help="Analyze a transcript, then write a new script")
    add_provider_args(run_p)
    run_p.add_argument("--topic", help="Topic of the new video", default=None)
    run_p.add_argument("--out", help="Folder to save the script as Markdown", default=None)

    analyze_p = sub.add_parser("analyze", help="Only analyze a transcript")
    add_provider_args(analyze_p)
    analyze_p.add_argument("--json", action="store_true", help="Print the analysis as JSON")

    config_p = sub.add_parser("config", help="Show or change provider settings")
    config_p.add_argument("action", choices=["show", "set", "unset"])
    config_p.add_argument("key", nargs="?", help=", ".join(KNOWN_KEYS))
    config_p.add_argument("value", nargs="?")
    return p


COMMANDS = {"run": cmd_run, "analyze": cmd_analyze, "config": cmd_config}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    global logger
    level = logging.DEBUG if args.verbose else logging.WARNING
    logger = configure_logging(log_dir=args.log_dir, level=level)
    logger.debug("Starting scriptalchemist with args: %s", args)

    if args.command == "config" and args.action in ("set", "unset") and not args.key:
        _status(f"config {args.action} requires a KEY")
        return 2

    store = SettingsStore(args.settings)
    try:
        code = COMMANDS[args.command](args, store)
    except ScriptAlchemistError as e:
        logger.debug("Command failed", exc_info=True)
        _status(f"Error: {e}")
        return 1
    except (OSError, ValueError) as e:
        _status(f"Error: {e}")
        return 1

    if args.verbose:
        for name, stats in get_collector().summary().items():
            logger.debug("timing %s: count=%d total=%.2fs", name, stats["count"], stats["total"])
        logger.debug("counters: %s", get_collector().get_counters())
    return code


if __name__ == "__main__":
    raise SystemExit(main())
