"""Request a prediction from the command line.

Reads OPENAI_API_KEY / OPENAI_BASE_URL / OPENAI_MODEL from the environment (or .env).

Examples:
    python -m scripts.predict --age 45 --category "chronic pain" \
        --problem "persistent lower back pain for 3 months" --medication naproxen
    python -m scripts.predict --age 45 --category "chronic pain" \
        --problem "persistent lower back pain for 3 months" --full
"""

from __future__ import annotations

import argparse
import asyncio
import json

from app.core.logging import setup_logging
from app.domain.exceptions import BusinessValidationError
from app.predictions.service import get_prediction


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Get a short health prediction from the LLM.")
    parser.add_argument("--age", required=True, help="Age in years (0-150).")
    parser.add_argument("--category", required=True, help="Symptom category.")
    parser.add_argument("--problem", required=True, help="Problem description.")
    parser.add_argument("--medication", default=None, help="Current medication, if any.")
    parser.add_argument(
        "--full",
        action="store_true",
        help="Print the structured result (raw response and metadata) as JSON.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Entry point."""
    setup_logging()
    args = _parse_args(argv)

    try:
        result = asyncio.run(
            get_prediction(
                args.age,
                args.category,
                args.problem,
                args.medication,
                return_full_response=args.full,
            )
        )
    except BusinessValidationError as exc:
        raise SystemExit(f"Invalid input: {exc.message}") from None

    if isinstance(result, str):
        print(result)
    else:
        print(json.dumps(result.model_dump(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
