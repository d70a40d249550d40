"""Select-field choice builders shared by the module forms."""

from app.models.location import Location
from app.models.vendor import Vendor


def optional_int(value):
    if value in (None, "", "None"):
        return None
    return int(value)


def location_choices(only_id=None, blank=True):
    query = Location.query.order_by(Location.name.asc())
    if only_id is not None:
        query = query.filter(Location.id == only_id)
    choices = [("", "Select location")] if blank else []
    choices.extend((loc.id, f"{loc.name} ({loc.code})") for loc in query.all())
    return choices


def vendor_choices():
    choices = [("", "Select vendor")]
    choices.extend(
        (vendor.vendor_id, vendor.name)
        for vendor in Vendor.query.order_by(Vendor.name.asc()).all()
    )
    return choices


def optional_str(value):
    if value in (None, "", "None"):
        return None
    return str(value)
