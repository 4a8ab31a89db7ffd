"""Per-product overrides passed through the embedding page's query string.

Keys look like ``<productId>-<field>=<value>``, e.g. ``pias-product_annual_yield=3.2``.
``<productId>-hidden=yes`` removes the product from the catalog.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Tuple, Union
from urllib.parse import parse_qsl

from pydantic import ValidationError

from savings_simulator.domain.catalog import Product
from savings_simulator.utils.logging import get_logger

logger = get_logger(__name__)

OVERRIDE_KEY = re.compile(r"^([a-zA-Z0-9-]+)-(.+)$")

# products-table column -> Product field
FIELD_MAPPING = {
    "product_annual_yield": "annual_yield",
    "product_annual_yield_5_plus_years": "yield_5_plus_years",
    "product_annual_yield_10_plus_years": "yield_10_plus_years",
    "product_initial_contribution_min": "min_initial_deposit",
    "product_initial_contribution_max": "max_initial_deposit",
    "product_monthly_contribution_min": "min_monthly_deposit",
    "product_monthly_contribution_max": "max_monthly_deposit",
    "product_duration_months_min": "min_term_months",
    "product_total_contribution_max": "max_total_contribution",
    "product_annual_contribution_max": "annual_contribution_limit",
    "product_name": "name",
    "product_description": "description",
    "product_tax_treatment": "taxation",
    "product_disclaimer": "disclaimer",
    "product_url": "url",
    "product_goal": "goal",
}

NUMERIC_FIELDS = {
    "annual_yield",
    "yield_5_plus_years",
    "yield_10_plus_years",
    "min_initial_deposit",
    "max_initial_deposit",
    "min_monthly_deposit",
    "max_monthly_deposit",
    "min_term_months",
    "max_term_years",
    "max_total_contribution",
    "annual_contribution_limit",
}

Params = Union[str, Mapping[str, str], Iterable[Tuple[str, str]]]


class InvalidOverrideError(ValueError):
    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


@dataclass(frozen=True)
class ProductOverride:
    product_id: str
    field: str
    value: Any
    hidden: bool = False

    @property
    def target_field(self) -> str:
        return FIELD_MAPPING.get(self.field, self.field)


def _convert(field: str, value: str) -> Any:
    if FIELD_MAPPING.get(field, field) in NUMERIC_FIELDS:
        try:
            return float(value)
        except ValueError:
            return value
    return value


def _pairs(params: Params) -> List[Tuple[str, str]]:
    if isinstance(params, str):
        return parse_qsl(params.lstrip("?"), keep_blank_values=True)
    if isinstance(params, Mapping):
        return list(params.items())
    return list(params)


def parse_overrides(params: Params) -> List[ProductOverride]:
    overrides: List[ProductOverride] = []
    for key, value in _pairs(params):
        match = OVERRIDE_KEY.match(key)
        if not match:
            continue
        product_id, field = match.groups()
        if field == "hidden":
            if value.lower() == "yes":
                overrides.append(ProductOverride(product_id=product_id, field="", value=None, hidden=True))
            continue
        overrides.append(ProductOverride(product_id=product_id, field=field, value=_convert(field, value)))
    return overrides


def apply_overrides(products: Iterable[Product], overrides: List[ProductOverride]) -> List[Product]:
    """Drop hidden products and patch fields on the rest."""
    products = list(products)
    if not overrides:
        return products

    hidden_ids = {override.product_id for override in overrides if override.hidden}
    if hidden_ids:
        logger.info("hiding products %s", sorted(hidden_ids))

    result: List[Product] = []
    for product in products:
        if product.id in hidden_ids:
            continue

        updates = {}
        for override in overrides:
            if override.hidden or override.product_id != product.id:
                continue
            target = override.target_field
            if target not in Product.model_fields or target == "id":
                logger.warning("ignoring override for %s: unknown field %r", product.id, override.field)
                continue
            updates[target] = override.value

        if not updates:
            result.append(product)
            continue

        logger.debug("applying overrides to %s: %s", product.id, updates)
        try:
            result.append(Product.model_validate({**product.model_dump(), **updates}))
        except ValidationError as exc:
            raise InvalidOverrideError(
                [f"{product.id}.{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
            ) from exc

    return result
