#!/usr/bin/env python3
"""
Fintrack Intelligence Demonstration

This script loads a JSON fixture into the in-memory store and runs every
advisory operation against it:
1. Categorize a few transaction descriptions
2. Generate monthly insights
3. Suggest budgets from recent history
4. Forecast the next months of spending
5. Answer free-text questions

Run: python examples/fintrack_demo.py
     python examples/fintrack_demo.py examples/sample_data.json --as-of 2025-04-15 --json
"""

import argparse
import json
from datetime import date
from pathlib import Path

from fintrack_core import (
    InMemoryFinanceStore,
    IntelligenceEngine,
    configure_logging,
    load_config,
)

DEFAULT_DATA = Path(__file__).parent / "sample_data.json"

SAMPLE_DESCRIPTIONS = [
    ("Starbucks coffee", "4.50"),
    ("Uber ride downtown", "23.10"),
    ("Netflix subscription", "15.99"),
    ("Mystery charge", "42.00"),
]

SAMPLE_QUESTIONS = [
    "How are my budgets doing?",
    "What should I save?",
    "Where am I spending the most?",
    "How am I doing?",
]


def print_section(title: str) -> None:
    print()
    print("=" * 70)
    print(title)
    print("=" * 70)


def dump(model, as_json: bool) -> None:
    if as_json:
        print(json.dumps(model.model_dump(mode="json"), indent=2, ensure_ascii=False))
    else:
        print(model)


def main():
    """Main entry point for the demo."""
    parser = argparse.ArgumentParser(
        description="Run the fintrack advisory operations against a JSON fixture",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Bundled sample data, evaluated as of mid-April 2025
  python fintrack_demo.py --as-of 2025-04-15

  # Your own export, full JSON output
  python fintrack_demo.py ./export.json --user alice --json
        """,
    )
    parser.add_argument(
        "data",
        nargs="?",
        default=str(DEFAULT_DATA),
        help="JSON file with categories, transactions and budgets",
    )
    parser.add_argument(
        "--user",
        default="user-1",
        help="User id to analyse (default: user-1)",
    )
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=date(2025, 4, 15),
        help="Evaluation day in YYYY-MM-DD form (default: 2025-04-15)",
    )
    parser.add_argument(
        "--months",
        type=int,
        default=3,
        help="Months to forecast (default: 3)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print full JSON results instead of model reprs",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level for engine output on stderr (default: FINTRACK_LOG_LEVEL)",
    )
    args = parser.parse_args()

    config = load_config()
    configure_logging(args.log_level or config.log_level)

    store = InMemoryFinanceStore.from_json_file(args.data)
    engine = IntelligenceEngine(store, config=config, clock=lambda: args.as_of)

    print_section("CATEGORIZATION")
    for description, amount in SAMPLE_DESCRIPTIONS:
        result = engine.categorize(args.user, description, amount)
        name = result.suggested_category.name if result.suggested_category else "-"
        print(f"{description:<28} -> {name:<20} ({result.confidence.value}, score {result.score})")

    print_section("INSIGHTS")
    report = engine.insights(args.user)
    for insight in report.insights:
        print(f"[{insight.priority.value:>6}] {insight.title}: {insight.description}")
    if args.json:
        dump(report, args.json)

    print_section("BUDGET SUGGESTIONS")
    suggestions = engine.budget_suggestions(args.user)
    for s in suggestions.suggestions:
        print(f"{s.category.name:<20} ${s.suggested_amount:>10,.2f}  ({s.confidence.value})")
    print(suggestions.methodology)

    print_section("SPENDING FORECAST")
    forecast = engine.predict_spending(args.user, args.months)
    for point in forecast.predictions:
        print(f"{point.label:<10} ${point.predicted_amount:>10,.2f}  ({point.confidence.value})")
    print(f"Based on: {forecast.based_on}")
    if args.json:
        dump(forecast, args.json)

    print_section("ADVICE")
    for question in SAMPLE_QUESTIONS:
        reply = engine.advice(args.user, question)
        print(f"Q: {question}")
        print(f"A ({reply.type.value}): {reply.response}")
        print()


if __name__ == "__main__":
    main()
