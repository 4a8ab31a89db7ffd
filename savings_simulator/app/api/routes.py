"""HTTP routes for the Flask API."""

from http import HTTPStatus
from typing import Any, Dict, List

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from savings_simulator.core.chart import yearly_points
from savings_simulator.core.projection import InvalidProjectionInput, project
from savings_simulator.core.summary import summarize
from savings_simulator.domain.catalog import (
    GOAL_LABELS,
    Product,
    default_form_values,
    ordered_goals,
    products_for_goal,
)
from savings_simulator.domain.overrides import (
    InvalidOverrideError,
    apply_overrides,
    parse_overrides,
)
from savings_simulator.domain.simulation import (
    MonthlyValue,
    SimulationError,
    run_simulation,
)
from savings_simulator.schemas.projection import ProjectionRequest, ProjectionResponse
from savings_simulator.schemas.simulation import (
    CatalogEntry,
    CatalogResponse,
    GoalEntry,
    PingResponse,
    SimulationRequest,
)
from savings_simulator.utils.logging import get_logger

api_bp = Blueprint("api", __name__)
logger = get_logger(__name__)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return jsonify({"detail": exc.errors(include_url=False, include_context=False)}), HTTPStatus.BAD_REQUEST


@api_bp.errorhandler(InvalidProjectionInput)
@api_bp.errorhandler(InvalidOverrideError)
@api_bp.errorhandler(SimulationError)
def _handle_input_error(exc):
    logger.warning("rejected request: %s", exc)
    return jsonify({"detail": exc.errors}), HTTPStatus.UNPROCESSABLE_ENTITY


def _catalog() -> List[Product]:
    """Configured catalog with the query-string overrides applied."""
    overrides = parse_overrides(request.args.items(multi=True))
    return apply_overrides(current_app.config["CATALOG"], overrides)


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = PingResponse(message="pong")
    return jsonify(response.model_dump())


@api_bp.get("/goals")
def goals() -> Any:
    entries = [
        GoalEntry(id=goal, label=GOAL_LABELS.get(goal, goal)).model_dump()
        for goal in ordered_goals(_catalog())
    ]
    return jsonify(entries)


@api_bp.get("/products")
def products() -> Any:
    """Products for a goal (all when none is given), with form defaults."""
    eligible = products_for_goal(_catalog(), request.args.get("goal"))
    response = CatalogResponse(
        products=[
            CatalogEntry(product=product, defaults=default_form_values(product))
            for product in eligible
        ]
    )
    return jsonify(response.model_dump())


@api_bp.post("/projection")
def projection() -> Any:
    """Run the projection engine on explicit terms."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = ProjectionRequest.model_validate(raw_payload)
    terms = payload.to_terms()
    result = project(terms)
    summary = summarize(result, terms.term_years)

    response = ProjectionResponse(
        annual_yield=terms.resolved_yield(),
        final_amount=summary.final_amount,
        total_contributions=summary.total_contributions,
        generated_interest=summary.generated_interest,
        term_months=summary.term_months,
        monthly_series=[MonthlyValue(month=p.month, value=p.value) for p in result.monthly_series],
        yearly_series=[MonthlyValue(month=p.month, value=p.value) for p in yearly_points(result)],
    )
    return jsonify(response.model_dump())


@api_bp.post("/simulation")
def simulation() -> Any:
    """Simulate up to the configured number of catalog products side by side."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = SimulationRequest.model_validate(raw_payload)
    settings = current_app.config["SETTINGS"]

    outcome = run_simulation(
        products_for_goal(_catalog(), payload.goal),
        payload.selections,
        max_selected=settings.max_selected_products,
    )
    return jsonify(outcome.model_dump())
