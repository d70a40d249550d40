"""Location code generation (``CCC-TTT-NNN``)."""

from app import db
from app.models.location import Location


def location_code_prefix(country: str, city: str) -> str:
    country_part = (country or "").strip()[:3].upper()
    city_part = (city or "").strip()[:3].upper()
    return f"{country_part}-{city_part}"


def generate_location_code(country: str, city: str) -> str:
    """Next free code for the country/city pair, e.g. ``IND-MUM-003``."""
    prefix = location_code_prefix(country, city)
    with db.session.no_autoflush:
        existing = Location.query.filter(Location.code.like(f"{prefix}-%")).count()
    return f"{prefix}-{existing + 1:03d}"
