"""HTTP entry points for TradieQuote.

Provides endpoints for:
- Generating a quote from a job description
- Saving a quote behind a share link
- Fetching a shared quote
- Health checks
- Serving the built client bundle (production only)
"""

import asyncio
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
from uuid import uuid4

import structlog
from flask import Flask, Response, current_app, jsonify, request, send_from_directory
from flask_cors import CORS

from config.errors import QuoteError, ValidationError
from config.settings import settings
from models.quote import PropertyType, Quote, QuoteContext, Urgency
from services.pricing import calculate_totals, format_currency
from services.quote_generator import QuoteGenerator, default_generator
from services.quote_store import InMemoryQuoteStore, QuoteStore
from utils.quote_logger import log_quote_saved
from validators.quote_validator import validate_saved_items

logger = structlog.get_logger()

SHARE_PATH_PREFIX = "/share/"

# ============================================================================
# Helper Functions
# ============================================================================


def error_response(message: str, status: int) -> Tuple[Response, int]:
    """Build error response."""
    return jsonify({"error": message}), status


def get_request_json() -> Dict[str, Any]:
    """Extract the JSON object from the request body.

    Returns:
        Parsed JSON object (empty when the body is empty).

    Raises:
        ValidationError: If the body is not a JSON object.
    """
    data = request.get_json(force=True, silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(message="Request body must be a JSON object")
    return data


def optional_text(data: Dict[str, Any], key: str, strip: bool = True) -> Optional[str]:
    """Read an optional string field; blank values count as absent.

    Raises:
        ValidationError: If the field is present but not a string.
    """
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(message=f"Invalid {key}", field=key)
    if not value.strip():
        return None
    return value.strip() if strip else value


def parse_property_type(data: Dict[str, Any]) -> Optional[PropertyType]:
    value = optional_text(data, "propertyType")
    if value is None:
        return None
    try:
        return PropertyType(value)
    except ValueError:
        raise ValidationError(message=f"Unknown propertyType: {value}", field="propertyType")


def parse_urgency(data: Dict[str, Any]) -> Optional[Urgency]:
    value = optional_text(data, "urgency")
    if value is None:
        return None
    try:
        return Urgency(value)
    except ValueError:
        raise ValidationError(message=f"Unknown urgency: {value}", field="urgency")


def get_store() -> QuoteStore:
    return current_app.config["QUOTE_STORE"]


def get_generator() -> QuoteGenerator:
    return current_app.config["QUOTE_GENERATOR"]


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2026-01-01T00:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ============================================================================
# API Endpoints
# ============================================================================


def health():
    """Health check for deployment platforms."""
    return jsonify({"status": "ok", "timestamp": utc_timestamp()})


def generate():
    """Generate a quote from a job description.

    Request body:
    {
        "jobDescription": "Trim hedges and mow lawn",
        "customerName": "Sam",          // optional
        "location": "Parramatta NSW",   // optional
        "propertyType": "residential-house",  // optional
        "urgency": "this-week"          // optional
    }

    Response:
    {
        "items": [{"label": "...", "qty": 2, "unit": "hr", "unitPrice": 90}],
        "notes": "...",                 // optional
        "subtotal": 340,
        "gst": 34,
        "total": 374
    }
    """
    try:
        data = get_request_json()
        job_description = data.get("jobDescription")

        if not isinstance(job_description, str) or not job_description.strip():
            return error_response("Job description is required", 400)

        job_description = job_description.strip()
        context = QuoteContext(
            customer_name=optional_text(data, "customerName"),
            location=optional_text(data, "location"),
            property_type=parse_property_type(data),
            urgency=parse_urgency(data),
        )

        generated = asyncio.run(get_generator().generate(job_description, context))
        totals = calculate_totals(generated.items, job_description)

        body: Dict[str, Any] = {"items": [item.to_dict() for item in generated.items]}
        if generated.notes is not None:
            body["notes"] = generated.notes
        body.update(totals.model_dump())

        return jsonify(body)

    except ValidationError as e:
        return error_response(e.message, 400)
    except Exception as e:
        logger.exception("generate_error", error=str(e))
        return error_response("Failed to generate quote", 500)


def save():
    """Save a quote and return its share link.

    Request body:
    {
        "jobDescription": "...",
        "items": [{"label": "...", "qty": 2, "unit": "hr", "unitPrice": 90}],
        "customerName": "...", "location": "...", "propertyType": "...",
        "urgency": "...", "notes": "..."   // all optional
    }

    Response:
    {
        "slug": "aB3dE5fG",
        "url": "/share/aB3dE5fG"
    }
    """
    try:
        data = get_request_json()
        job_description = data.get("jobDescription")
        raw_items = data.get("items")

        if (
            not isinstance(job_description, str)
            or not job_description.strip()
            or not isinstance(raw_items, list)
            or not raw_items
        ):
            return error_response("Invalid quote data", 400)

        validation = validate_saved_items(raw_items)
        if not validation.is_valid:
            return error_response(validation.issue.message, 400)

        items = validation.items
        try:
            totals = calculate_totals(items, job_description)
        except OverflowError:
            return error_response("Invalid quote data", 400)
        customer_name = optional_text(data, "customerName", strip=False)
        location = optional_text(data, "location", strip=False)
        property_type = parse_property_type(data)
        urgency = parse_urgency(data)
        notes = optional_text(data, "notes", strip=False)

        def build_quote(slug: str) -> Quote:
            return Quote(
                id=str(uuid4()),
                created_at=int(time.time() * 1000),
                customer_name=customer_name,
                location=location,
                property_type=property_type,
                urgency=urgency,
                job_description=job_description,
                items=items,
                subtotal=totals.subtotal,
                gst=totals.gst,
                total=totals.total,
                notes=notes,
                slug=slug,
            )

        quote = get_store().create(build_quote)
        log_quote_saved(quote.slug, len(quote.items), format_currency(quote.total))

        return jsonify({"slug": quote.slug, "url": f"{SHARE_PATH_PREFIX}{quote.slug}"})

    except ValidationError as e:
        return error_response(e.message, 400)
    except QuoteError as e:
        logger.error("save_error", error=e.message, code=e.code)
        return error_response("Failed to save quote", 500)
    except Exception as e:
        logger.exception("save_exception", error=str(e))
        return error_response("Failed to save quote", 500)


def share(slug: str):
    """Fetch a saved quote by slug."""
    try:
        quote = get_store().get(slug)
        if quote is None:
            return error_response("Quote not found", 404)
        return jsonify(quote.to_dict())

    except Exception as e:
        logger.exception("get_quote_error", slug=slug, error=str(e))
        return error_response("Failed to get quote", 500)


# ============================================================================
# Static client (production)
# ============================================================================


def register_client_routes(app: Flask, dist_dir: Path) -> None:
    """Serve the built client, falling back to index.html for SPA routes."""

    def client(path: str = ""):
        if path.startswith("api/") or path == "api":
            return error_response("Not found", 404)
        target = dist_dir / path
        if path and target.is_file():
            return send_from_directory(dist_dir, path, max_age=31536000)
        return send_from_directory(dist_dir, "index.html")

    app.add_url_rule("/", "client_index", client, methods=["GET"])
    app.add_url_rule("/<path:path>", "client", client, methods=["GET"])
    logger.info("client_bundle_enabled", dist_dir=str(dist_dir))


# ============================================================================
# App factory
# ============================================================================


def create_app(
    quote_store: Optional[QuoteStore] = None,
    quote_generator: Optional[QuoteGenerator] = None,
    serve_client: Optional[bool] = None
) -> Flask:
    """Create the Flask application.

    Args:
        quote_store: Storage collaborator (default: in-memory store).
        quote_generator: Quote generator (default: configured from settings).
        serve_client: Serve the client bundle (default: in production when
            the bundle directory exists).
    """
    app = Flask(__name__, static_folder=None)
    CORS(app)

    app.config["QUOTE_STORE"] = quote_store if quote_store is not None else InMemoryQuoteStore()
    app.config["QUOTE_GENERATOR"] = quote_generator if quote_generator is not None else default_generator()

    app.add_url_rule("/api/health", "health", health, methods=["GET"])
    app.add_url_rule("/api/generate", "generate", generate, methods=["POST"])
    app.add_url_rule("/api/save", "save", save, methods=["POST"])
    app.add_url_rule("/api/share/<slug>", "share", share, methods=["GET"])

    dist_dir = Path(settings.client_dist_dir)
    if serve_client is None:
        serve_client = settings.is_production and dist_dir.is_dir()
    if serve_client:
        register_client_routes(app, dist_dir)

    return app
