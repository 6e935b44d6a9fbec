"""Read-only promotion catalog loaded from a YAML file."""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from cruise_pricing.core.config import get_settings
from cruise_pricing.models import InvalidPromotionRule, PromotionRule
from cruise_pricing.schemas.promotion import PromotionRuleIn
from cruise_pricing.services.eligibility_service import resolve_now

logger = logging.getLogger(__name__)


class PromotionCatalogError(RuntimeError):
    """Raised when the promotion catalog cannot be loaded."""


class PromotionCatalog:
    """In-memory set of promotion rules keyed by id.

    The catalog is the promotion source for the HTTP layer; it never tracks
    usage, so ``current_uses`` is whatever the file recorded.
    """

    def __init__(self, rules: Iterable[PromotionRule] = ()) -> None:
        self._rules: dict[str, PromotionRule] = {}
        for rule in rules:
            if rule.id in self._rules:
                raise PromotionCatalogError(f"Duplicate promotion id: {rule.id}")
            self._rules[rule.id] = rule

    def __len__(self) -> int:
        return len(self._rules)

    @classmethod
    def from_rows(cls, rows: Iterable[dict[str, Any]]) -> PromotionCatalog:
        rules: list[PromotionRule] = []
        for index, row in enumerate(rows):
            try:
                rules.append(PromotionRuleIn.model_validate(row).to_domain())
            except (ValidationError, InvalidPromotionRule) as exc:
                raise PromotionCatalogError(f"Invalid promotion at index {index}: {exc}") from exc
        return cls(rules)

    @classmethod
    def from_yaml(cls, path: Path | str) -> PromotionCatalog:
        """Load promotions from a YAML list or a mapping with a ``promotions`` key."""
        path = Path(path)
        try:
            with path.open(encoding="utf-8") as handle:
                data = yaml.safe_load(handle)
        except OSError as exc:
            raise PromotionCatalogError(f"Cannot read promotions file {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise PromotionCatalogError(f"Malformed promotions file {path}: {exc}") from exc

        if data is None:
            rows: Any = []
        elif isinstance(data, dict):
            rows = data.get("promotions") or []
        else:
            rows = data
        if not isinstance(rows, list):
            raise PromotionCatalogError(f"{path}: expected a list of promotions")

        catalog = cls.from_rows(rows)
        logger.info("Loaded %d promotion(s) from %s", len(catalog), path)
        return catalog

    def get(self, promotion_id: str) -> PromotionRule | None:
        return self._rules.get(promotion_id)

    def all(self) -> list[PromotionRule]:
        return list(self._rules.values())

    def list_active(self, now: datetime.datetime | None = None) -> list[PromotionRule]:
        """Active promotions whose validity window contains ``now``."""
        now = resolve_now(now)
        active = [
            rule
            for rule in self._rules.values()
            if rule.is_active and rule.valid_from <= now <= rule.valid_to
        ]
        return sorted(active, key=lambda rule: rule.sort_key)


@lru_cache
def get_catalog() -> PromotionCatalog:
    """Return the catalog configured by ``PROMOTIONS_FILE`` (empty when unset)."""
    settings = get_settings()
    if settings.promotions_file is None:
        return PromotionCatalog()
    return PromotionCatalog.from_yaml(settings.promotions_file)
