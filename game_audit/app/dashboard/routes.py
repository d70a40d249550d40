from flask import Blueprint, render_template
from flask_login import login_required, current_user

from app.navigation import get_navigation_for_user, visible_tiles
from app.permissions import Principal, get_policy

dashboard_bp = Blueprint("dashboard", __name__)


@dashboard_bp.route("/dashboard")
@login_required
def index():
    principal = Principal.from_user(current_user)
    tiles = [
        item for item in get_navigation_for_user(current_user)
        if item["key"] in visible_tiles(current_user)
    ]
    today = get_policy().clock.today()
    return render_template(
        "dashboard/index.html",
        tiles=tiles,
        principal=principal,
        business_date=today,
    )
