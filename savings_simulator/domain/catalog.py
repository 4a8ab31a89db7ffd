from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

from savings_simulator.core.projection import AnnualContributionCap, ProductTerms

DEFAULT_MIN_TERM_MONTHS = 5

GOAL_LABELS: Dict[str, str] = {
    "maxima_disponibilidad": "Máxima disponibilidad",
    "maximizar_beneficios": "Maximizar beneficios fiscales",
    "ahorrar_jubilacion": "Ahorrar para la jubilación",
    "mas_retorno": "Más retorno de inversión a largo plazo",
}

# goals listed first, in this order; anything else keeps first-seen order
GOAL_PRIORITY: List[str] = list(GOAL_LABELS)


class Product(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    annual_yield: float = Field(ge=0)
    yield_5_plus_years: Optional[float] = Field(default=None, ge=0)
    yield_10_plus_years: Optional[float] = Field(default=None, ge=0)
    min_initial_deposit: float = Field(default=0.0, ge=0)
    max_initial_deposit: Optional[float] = Field(default=None, ge=0)
    min_monthly_deposit: float = Field(default=0.0, ge=0)
    max_monthly_deposit: Optional[float] = Field(default=None, ge=0)
    min_term_months: Optional[float] = Field(default=None, ge=0)
    max_term_years: Optional[int] = Field(default=None, ge=1)
    max_total_contribution: Optional[float] = Field(default=None, ge=0)
    annual_contribution_limit: Optional[float] = Field(default=None, ge=0)
    goal: str
    taxation: str = ""
    disclaimer: Optional[str] = None
    url: Optional[str] = None

    @property
    def goal_label(self) -> str:
        return GOAL_LABELS.get(self.goal, self.goal)

    def to_terms(self, initial_deposit: float, monthly_deposit: float, term_years: int) -> ProductTerms:
        """Attach this product's yield tiers and contribution limits to the user's inputs."""
        cap = (
            AnnualContributionCap(limit=self.annual_contribution_limit)
            if self.annual_contribution_limit is not None
            else None
        )
        return ProductTerms(
            initial_deposit=initial_deposit,
            monthly_deposit=monthly_deposit,
            term_years=term_years,
            annual_yield_percent=self.annual_yield,
            yield_5_plus_years=self.yield_5_plus_years,
            yield_10_plus_years=self.yield_10_plus_years,
            max_total_contribution=self.max_total_contribution,
            annual_contribution_cap=cap,
        )


class FormDefaults(BaseModel):
    initial_deposit: float
    monthly_deposit: float
    term_years: int


def default_form_values(product: Product) -> FormDefaults:
    """Pre-fill the form with the product minimums."""
    min_monthly = product.min_monthly_deposit
    min_term_months = (
        product.min_term_months
        if product.min_term_months is not None
        else DEFAULT_MIN_TERM_MONTHS
    )
    no_monthly = min_monthly == 0 and (product.max_monthly_deposit or 0) == 0
    return FormDefaults(
        initial_deposit=product.min_initial_deposit,
        monthly_deposit=0.0 if no_monthly else min_monthly,
        term_years=max(1, math.ceil(min_term_months / 12)),
    )


def products_for_goal(products: Iterable[Product], goal: Optional[str]) -> List[Product]:
    if not goal:
        return list(products)
    return [product for product in products if product.goal == goal]


def find_product(products: Iterable[Product], product_id: str) -> Optional[Product]:
    for product in products:
        if product.id == product_id:
            return product
    return None


def ordered_goals(products: Iterable[Product]) -> List[str]:
    seen: List[str] = []
    for product in products:
        if product.goal not in seen:
            seen.append(product.goal)

    def sort_key(goal: str):
        if goal in GOAL_PRIORITY:
            return (0, GOAL_PRIORITY.index(goal))
        return (1, seen.index(goal))

    return sorted(seen, key=sort_key)


def _optional_number(value: Any) -> Optional[float]:
    # empty and zero columns mean "not set" in the products table
    if value in (None, "", 0, "0"):
        return None
    return float(value)


def product_from_row(row: Mapping[str, Any]) -> Product:
    """Build a Product from a products-table row (external column names)."""
    return Product(
        id=str(row["id"]),
        name=row["product_name"],
        description=row.get("product_description") or "",
        annual_yield=float(row["product_annual_yield"]),
        yield_5_plus_years=_optional_number(row.get("product_annual_yield_5_plus_years")),
        yield_10_plus_years=_optional_number(row.get("product_annual_yield_10_plus_years")),
        min_initial_deposit=float(row.get("product_initial_contribution_min") or 0),
        max_initial_deposit=_optional_number(row.get("product_initial_contribution_max")),
        min_monthly_deposit=float(row.get("product_monthly_contribution_min") or 0),
        max_monthly_deposit=_optional_number(row.get("product_monthly_contribution_max")),
        min_term_months=_optional_number(row.get("product_duration_months_min")),
        max_total_contribution=_optional_number(row.get("product_total_contribution_max")),
        annual_contribution_limit=_optional_number(row.get("product_annual_contribution_max")),
        goal=row["product_goal"],
        taxation=row.get("product_tax_treatment") or "",
        disclaimer=row.get("product_disclaimer"),
        url=row.get("product_url"),
    )


def load_catalog(path: str) -> List[Product]:
    """Read a YAML list of products-table rows."""
    with open(path, "r", encoding="utf-8") as f:
        rows = yaml.safe_load(f) or []
    if not isinstance(rows, list):
        raise ValueError(f"{path}: expected a list of product rows")
    return [product_from_row(row) for row in rows]


def default_catalog() -> List[Product]:
    return [
        Product(
            id="plan-ahorro-multiplica",
            name="Plan Ahorro Multiplica",
            description="Incrementa tus ahorros, garantiza tu futuro",
            annual_yield=3.5,
            min_initial_deposit=0,
            min_monthly_deposit=30,
            min_term_months=1,
            max_term_years=30,
            goal="ahorrar_jubilacion",
            taxation="El rescate tributa como rendimientos del capital en el IRPF",
            disclaimer="Rentabilidad a cuenta del 3,5% con posibilidad de bonus adicional según resultados.",
        ),
        Product(
            id="plan-ahorro-flexible",
            name="Plan Ahorro Flexible",
            description="Tu dinero disponible cuando quieras",
            annual_yield=3.25,
            min_initial_deposit=0,
            min_monthly_deposit=60,
            min_term_months=1,
            max_term_years=25,
            goal="maxima_disponibilidad",
            taxation="El rescate tributa como rendimientos del capital en el IRPF",
            disclaimer="Alta rentabilidad del 3,25% con disponibilidad inmediata.",
        ),
        Product(
            id="pias",
            name="PIAS",
            description="Plan de ahorro asegurado con ventajas fiscales",
            annual_yield=3.0,
            yield_5_plus_years=3.5,
            yield_10_plus_years=4.0,
            min_initial_deposit=100,
            min_monthly_deposit=50,
            min_term_months=5,
            max_total_contribution=240000,
            annual_contribution_limit=8000,
            goal="maximizar_beneficios",
            taxation="Exento de tributación si se mantiene más de 5 años",
            disclaimer="Las aportaciones están limitadas a 8.000€ anuales y 240.000€ en total.",
        ),
        Product(
            id="sialp",
            name="SIALP",
            description="Seguro de ahorro a largo plazo con exención fiscal",
            annual_yield=2.75,
            min_initial_deposit=500,
            min_monthly_deposit=0,
            min_term_months=5,
            annual_contribution_limit=5000,
            goal="maximizar_beneficios",
            taxation="Exento de tributación si se mantiene más de 5 años",
            disclaimer="Las aportaciones están limitadas a 5.000€ anuales.",
        ),
        Product(
            id="plan-inversion-variable",
            name="Plan Inversión Variable",
            description="Mayores rendimientos a largo plazo",
            annual_yield=4.5,
            min_initial_deposit=1000,
            min_monthly_deposit=100,
            min_term_months=5,
            goal="mas_retorno",
            taxation="El rescate tributa como rendimientos del capital en el IRPF",
            disclaimer="Rentabilidad estimada, no garantizada.",
        ),
        Product(
            id="renta-vitalicia",
            name="Renta Vitalicia",
            description="Asegura ingresos para toda tu vida",
            annual_yield=3.8,
            min_initial_deposit=10000,
            min_monthly_deposit=0,
            min_term_months=10,
            goal="ahorrar_jubilacion",
            taxation="Tributación reducida según edad",
            disclaimer="La renta se garantiza de por vida.",
        ),
    ]
