"""Validate a promotions YAML file and summarize what is live."""

from __future__ import annotations

import argparse
import datetime
import logging
from pathlib import Path

from cruise_pricing.core.config import get_settings
from cruise_pricing.models import BASE_CURRENCY
from cruise_pricing.services.eligibility_service import format_discount_text
from cruise_pricing.services.promotion_catalog import PromotionCatalog, PromotionCatalogError

LOGGER = logging.getLogger("check_promotions")


def _parse_at(value: str) -> datetime.datetime:
    try:
        parsed = datetime.datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an ISO date or datetime: {value}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.UTC)
    return parsed


def summarize(
    catalog: PromotionCatalog,
    at: datetime.datetime | None = None,
    currency: str = BASE_CURRENCY,
) -> list[str]:
    """One line per promotion, flagging the ones live at ``at``."""
    active_ids = {rule.id for rule in catalog.list_active(at)}
    lines = []
    for rule in sorted(catalog.all(), key=lambda rule: rule.sort_key):
        state = "live" if rule.id in active_ids else "off"
        kind = "combinable" if rule.is_combinable else "exclusive"
        badge = format_discount_text(rule, currency)
        lines.append(f"{state:<4} {rule.id:<28} {badge:<12} {kind}")
    return lines


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check a promotions catalog file")
    parser.add_argument("path", type=Path, help="Promotions YAML file to validate.")
    parser.add_argument(
        "--at",
        type=_parse_at,
        default=None,
        help="Evaluate the live window at this ISO date/time (default: now, UTC).",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    try:
        catalog = PromotionCatalog.from_yaml(args.path)
    except PromotionCatalogError as exc:
        LOGGER.error("%s", exc)
        return 1

    for line in summarize(catalog, args.at, get_settings().base_currency):
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
