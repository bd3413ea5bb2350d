# main.py

import argparse
import json
import logging
import sys

from env_loader import load_env
from agent import MemoryAgent
from config import load_settings
from memory import JsonFileStore, StoreError
from memory.summary import WeeklyDigest
from prompts.builder import QUERY_MODE, WEEKLY_SUMMARY_MODE


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Save, browse and summarise Memory Amigo memories."
    )
    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help="Path to a YAML config file (default: amigo.yaml / amigo.example.yaml).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve", help="Run the HTTP API.")

    save = sub.add_parser("save", help="Save a memory (Raindrop first, local fallback).")
    save.add_argument("--content", "-t", required=True, help="Memory text.")
    save.add_argument("--title", default=None, help="Optional title.")
    save.add_argument("--tag", action="append", default=[], help="Tag (repeatable).")
    save.add_argument(
        "--category", action="append", default=[], help="Category (repeatable)."
    )
    save.add_argument("--mood", default=None, help="Optional mood.")
    save.add_argument(
        "--local",
        action="store_true",
        help="Skip Raindrop and write straight to the local store.",
    )

    list_cmd = sub.add_parser("list", help="List recent local memories.")
    list_cmd.add_argument("--limit", "-n", type=int, default=20)

    query = sub.add_parser("query", help="Search local memories.")
    query.add_argument("text", help="Substring to look for in title, content or tags.")
    query.add_argument("--limit", "-n", type=int, default=50)

    sub.add_parser("summary", help="Weekly summary of recent local memories.")

    ask = sub.add_parser("ask", help="Answer a question from recent local memories.")
    ask.add_argument("text", help="Question text.")

    return parser.parse_args(argv)


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def main(argv=None) -> int:
    # Load .env first so RAINDROP_* keys are visible to load_settings().
    load_env()
    logging.basicConfig(level=logging.INFO)

    args = parse_args(argv)
    settings = load_settings(args.config)

    if args.command == "serve":
        from webui.app import main as serve

        serve(settings)
        return 0

    memory_agent = MemoryAgent(settings, JsonFileStore(settings.store_path))

    if args.command == "save":
        payload = {
            "content": args.content,
            "title": args.title,
            "tags": args.tag,
            "categories": args.category,
            "mood": args.mood,
        }
        try:
            if args.local:
                outcome = memory_agent.save_local(payload)
            else:
                outcome = memory_agent.save(payload)
        except StoreError as e:
            print(f"[x] Failed to write local store: {e}", file=sys.stderr)
            return 1
        _print_json(outcome.to_response())
    elif args.command == "list":
        _print_json([item.to_dict() for item in memory_agent.list_local(args.limit)])
    elif args.command == "query":
        _print_json(
            [item.to_dict() for item in memory_agent.query_local(args.text, args.limit)]
        )
    elif args.command == "summary":
        digest = memory_agent.infer_local(WEEKLY_SUMMARY_MODE)
        if isinstance(digest, WeeklyDigest):
            _print_json(digest.to_dict())
    elif args.command == "ask":
        print(memory_agent.infer_local(QUERY_MODE, args.text))

    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n[Shutdown] Terminated by user.")
