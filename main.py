from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
import math
import uuid
from typing import Optional

# Load environment variables before anything reads them
load_dotenv()

from logging_config import get_logger, log_error, setup_logging
from providers.config import Settings, load_category_config
from providers.error_handling import (
    APIError,
    check_api_credentials,
    ConfigurationError,
    InvalidRequestError,
    ProvidersExhaustedError,
)
from providers.utils import validate_coordinates
from deals import DealsRequest, find_nearby_deals

SETTINGS = Settings.from_env()
CATEGORY_CONFIG = load_category_config()

setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)
logger = get_logger(__name__)

VERSION = "1.0.0"

app = FastAPI(
    title="Nearby Deals API",
    description="Nearby places and deals from OpenStreetMap or Google Places",
    version=VERSION
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str, **fields) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **fields})


def _parse_float(value: Optional[str]) -> Optional[float]:
    """Lenient float parsing for optional query params; None when unusable."""
    if value is None or value.strip() == "":
        return None
    try:
        parsed = float(value)
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


def parse_deals_request(lat: Optional[str], lon: Optional[str], radius: Optional[str],
                        category: Optional[str], search: Optional[str],
                        request_id: Optional[str] = None) -> DealsRequest:
    """
    Validate raw query params.

    Raises:
        InvalidRequestError: lat/lon missing or not valid coordinates
    """
    if not lat or not lon:
        raise InvalidRequestError("lat and lon are required query params")

    user_lat = _parse_float(lat)
    user_lon = _parse_float(lon)
    if user_lat is None or user_lon is None or not validate_coordinates(user_lat, user_lon):
        raise InvalidRequestError("lat and lon must be valid coordinates")

    return DealsRequest(
        lat=user_lat,
        lon=user_lon,
        radius_miles=_parse_float(radius),
        category=category,
        search=search,
        request_id=request_id,
    )


@app.get("/")
def root():
    """Service information."""
    return {
        "service": "Nearby Deals API",
        "status": "running",
        "version": VERSION,
        "provider": SETTINGS.provider,
        "credentials": check_api_credentials(),
        "endpoints": {
            "deals": "/deals/nearby?lat=LAT&lon=LON&radius=MILES&category=food|gas|groceries&search=TEXT",
            "health": "/health",
            "docs": "/docs"
        }
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/deals/nearby")
def get_nearby_deals(lat: Optional[str] = None,
                     lon: Optional[str] = None,
                     radius: Optional[str] = None,
                     category: Optional[str] = None,
                     search: Optional[str] = None):
    """
    Nearby places enriched with deal metadata, nearest first.

    Parameters:
        lat, lon: Origin coordinates (required)
        radius: Search radius in miles (default depends on provider)
        category: food, gas, groceries; anything else searches all shops and amenities
        search: Free-text keyword (Google Places provider only)

    Returns:
        JSON array of places (at most 50)
    """
    request_id = uuid.uuid4().hex[:8]

    try:
        deals_request = parse_deals_request(lat, lon, radius, category, search, request_id)
    except InvalidRequestError as e:
        logger.info(f"Rejected request: {e}", extra={"request_id": request_id, "error_type": "validation"})
        return _error(400, str(e))

    logger.info(
        f"Nearby deals request: {deals_request.lat},{deals_request.lon}",
        extra={
            "request_id": request_id,
            "lat": deals_request.lat,
            "lon": deals_request.lon,
            "category": category,
        }
    )

    try:
        return find_nearby_deals(deals_request, SETTINGS, CATEGORY_CONFIG)
    except ConfigurationError as e:
        log_error(logger, "configuration", str(e), request_id=request_id)
        return _error(500, str(e))
    except ProvidersExhaustedError as e:
        log_error(logger, "providers_exhausted", f"{e}: {e.failures}", request_id=request_id, api_name=e.api_name)
        return _error(500, "All map data providers failed")
    except APIError as e:
        log_error(logger, "api_error", str(e), request_id=request_id,
                  api_name=e.api_name, upstream_status=e.upstream_status)
        if e.upstream_status:
            return _error(500, str(e), status=e.upstream_status)
        return _error(500, "Failed to fetch nearby deals")
    except Exception as e:
        logger.error(f"Error in /deals/nearby: {e}", exc_info=True, extra={"request_id": request_id})
        return _error(500, "Failed to fetch nearby deals")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=SETTINGS.port)
