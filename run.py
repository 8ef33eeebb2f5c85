#!/usr/bin/env python3
"""
NLCal Runner Script

Entry point for resolving calendar commands from the command line.

Usage:
    python run.py "Gym from 6pm to 8pm"          # Print the intent as JSON
    python run.py "meeting at 2pm" --now 2024-06-01T20:00:00
    python run.py "Buy groceries" --no-model    # Local parser only
    python run.py --interactive                 # Type commands one by one
    python run.py --check-config                # Show configuration status
"""

import json
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))


def check_config(config_path=None) -> None:
    """Check configuration and print status."""
    from nlcal.core import ConfigurationError, OllamaClient, get_config

    print("\n" + "=" * 60)
    print("NLCal Configuration Check")
    print("=" * 60 + "\n")

    try:
        cfg = get_config(config_path)
    except ConfigurationError as e:
        print(f"❌ {e}")
        sys.exit(1)

    print(f"Log level:        {cfg.general.log_level}")
    print(f"Default duration: {cfg.parser.default_duration_minutes} min")
    print(f"AI fallback:      {'enabled' if cfg.generative.enabled else 'disabled'}")
    print(f"AI model:         {cfg.generative.model}")
    print(f"Ollama URL:       {cfg.generative.base_url}")
    print(f"Timeout:          {cfg.generative.timeout_ms} ms")

    if cfg.generative.enabled:
        client = OllamaClient.from_config(cfg.generative)
        if client.is_available():
            print("\n✅ Ollama is reachable. NLCal is ready to run.")
        else:
            print("\n⚠️ Ollama is not reachable. Only the local parser will be used.")
    else:
        print("\n✅ Configuration is valid. Running with the local parser only.")
    sys.exit(0)


def parse_now(value):
    """Parse the --now argument."""
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        print(f"❌ Invalid --now value: {value!r} (expected e.g. 2024-06-01T08:00:00)")
        sys.exit(2)


def run_interactive(resolver, now=None) -> None:
    """Read commands until 'quit'."""
    print("\n" + "=" * 50)
    print("       NLCal Interactive Mode")
    print("=" * 50)
    print("\nType a calendar command, or 'quit' to exit.\n")

    while True:
        try:
            text = input("📅 > ")
        except (EOFError, KeyboardInterrupt):
            print()
            break

        if text.strip().lower() in ("quit", "exit", "q"):
            break

        intent = resolver.resolve(text, now=now)
        print(intent.message)
        print(json.dumps(intent.to_dict(), indent=2, ensure_ascii=False))
        print()

    print("👋 Goodbye!")


def main():
    import argparse

    parser = argparse.ArgumentParser(description="NLCal - Natural-language calendar commands")
    parser.add_argument("text", nargs="?", help="Command to resolve, e.g. \"Gym from 6pm to 8pm\"")
    parser.add_argument("--now", type=str, metavar="ISO", help="Reference time (default: now)")
    parser.add_argument("--no-model", action="store_true", help="Disable the AI fallback")
    parser.add_argument("--interactive", "-i", action="store_true", help="Interactive mode")
    parser.add_argument("--check-config", action="store_true", help="Validate configuration and exit")
    parser.add_argument("--config", type=str, help="Path to configuration file")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")

    args = parser.parse_args()

    if args.check_config:
        check_config(args.config)
        return

    from nlcal.core import ConfigurationError, get_config, setup_logging
    from nlcal.parsing import IntentResolver

    try:
        cfg = get_config(args.config)
    except ConfigurationError as e:
        print(f"❌ {e}")
        sys.exit(1)

    if args.no_model:
        cfg.generative.enabled = False
    if args.debug:
        cfg.general.debug = True

    setup_logging(cfg, file_logging=args.debug)

    resolver = IntentResolver.from_config(cfg)
    now = parse_now(args.now)

    if args.interactive:
        run_interactive(resolver, now=now)
        return

    if args.text is None:
        parser.print_help()
        return

    intent = resolver.resolve(args.text, now=now)
    print(json.dumps(intent.to_dict(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
