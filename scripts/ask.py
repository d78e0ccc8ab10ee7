#!/usr/bin/env python3
"""
Resolve one query through the fallback chain from the command line.

Uses the same wiring as the API (config from env / .env) and prints the JSON
body /search would return. Exit code 1 when every source fails.

Run from project root:

    python scripts/ask.py "capital of France"
    python scripts/ask.py --ai "write a haiku about caching"
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Project root on path so "intersearch" resolves without installing
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from intersearch.core.errors import AllSourcesExhaustedError, SourceError
from intersearch.main import build_resolver
from intersearch.services.answer_service import OpenAIAnswerAdapter


async def _run(text: str, direct: bool) -> dict:
    answers = OpenAIAnswerAdapter()
    if direct:
        return {"assistant": "I", "reply": await answers.reply(text)}
    resolution = await build_resolver(answers).resolve(text)
    body = resolution.outcome.model_dump(mode="json", by_alias=True)
    if resolution.cached:
        body["cached"] = True
    return body


def main() -> None:
    parser = argparse.ArgumentParser(description="Query InterSearch without starting the server.")
    parser.add_argument("text", help="Search query (or prompt with --ai).")
    parser.add_argument(
        "--ai",
        action="store_true",
        help="Ask the assistant directly instead of running the search fallback.",
    )
    args = parser.parse_args()

    text = args.text.strip()
    if not text:
        parser.error("query must not be empty")

    try:
        body = asyncio.run(_run(text, args.ai))
    except (AllSourcesExhaustedError, SourceError) as e:
        print(json.dumps({"error": e.message}), file=sys.stderr)
        sys.exit(1)
    print(json.dumps(body, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
