#!/usr/bin/env python3
"""Dog Match: single entry point.

Ranks the dog catalog against a saved set of quiz answers and prints the
results, or launches the FastAPI matching service.

Usage:
    python main.py
    python main.py --port 8000
    python main.py --catalog data/dogs.csv --answers answers.json
    python main.py --answers answers.json --top-k 5 --denominator fixed
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import threading
import time
import webbrowser
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger("dogmatch")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _open_browser(url: str, delay: float = 2.0) -> None:
    """Open browser after a delay to give the server time to start.

    Args:
        url: URL to open in the browser.
        delay: Seconds to wait before opening.
    """
    def _delayed_open():
        time.sleep(delay)
        logger.info("Opening browser at %s", url)
        webbrowser.open(url)

    thread = threading.Thread(target=_delayed_open, daemon=True)
    thread.start()


def _print_rankings(
    catalog_path: Path,
    answers_path: Path,
    top_k: int,
    denominator_mode: str,
    workers: int,
) -> None:
    """Rank the catalog against one answer file and print a table."""
    from dogmatch.data.processor import load_answers, load_dogs
    from dogmatch.matching.ranker import DogRanker
    from dogmatch.matching.reasons import explain, match_label
    from dogmatch.matching.weights import MatchingConfig

    dogs = load_dogs(catalog_path)
    answers = load_answers(answers_path)
    ranker = DogRanker(MatchingConfig(denominator_mode=denominator_mode), max_workers=workers)

    results = ranker.rank(dogs, answers)
    logger.info(
        "Ranked %d dogs against %d answers (%s denominator)",
        len(results),
        answers.answered_count(),
        denominator_mode,
    )

    for position, result in enumerate(results[:top_k], start=1):
        reasons = "; ".join(explain(result.breakdown, result.dog, detailed=True))
        print(
            f"{position:>3}. {result.dog.name or 'Unnamed':<20} "
            f"{result.score_pct:>5.1f}%  {match_label(result.score_pct):<15} {reasons}"
        )


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> None:
    """Rank from the command line, or serve the matching API."""
    parser = argparse.ArgumentParser(description="Dog Match compatibility ranking")
    parser.add_argument(
        "--catalog", type=Path, default=None, help="Dog catalog (.csv or .json)"
    )
    parser.add_argument(
        "--answers",
        type=Path,
        default=None,
        help="Quiz answers JSON; prints rankings instead of serving",
    )
    parser.add_argument(
        "--top-k", type=int, default=None, help="Rows to print with --answers"
    )
    parser.add_argument(
        "--denominator",
        choices=["active", "fixed"],
        default=None,
        help="Percentage denominator mode",
    )
    parser.add_argument(
        "--port", type=int, default=None, help="Server port"
    )
    parser.add_argument(
        "--host", type=str, default=None, help="Server host"
    )
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Do not open the API docs in a browser",
    )
    args = parser.parse_args()

    from dogmatch.config import get_config

    config = get_config()
    catalog_path = args.catalog or config.catalog_path

    if args.answers is not None:
        try:
            _print_rankings(
                catalog_path,
                args.answers,
                top_k=args.top_k or config.default_top_k,
                denominator_mode=args.denominator or config.denominator_mode,
                workers=config.rank_workers,
            )
        except (FileNotFoundError, ValueError) as exc:
            logger.error("Could not rank: %s", exc)
            sys.exit(1)
        return

    import uvicorn

    from dogmatch.api.app import create_app

    # The app reads its settings from the environment at startup.
    os.environ["CATALOG_PATH"] = str(catalog_path)
    if args.denominator:
        os.environ["MATCH_DENOMINATOR_MODE"] = args.denominator

    host = args.host or config.host
    port = args.port or config.port
    logger.info("Launching matching API on %s:%d", host, port)

    app = create_app()

    if not args.no_browser:
        _open_browser(f"http://localhost:{port}/docs")

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
