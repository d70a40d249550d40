"""Request parsing and response helpers shared by the blueprints."""

from flask import flash, jsonify, redirect, request, url_for


def parse_int(field_name, source=None):
    source = request.form if source is None else source
    value = source.get(field_name)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def wants_json() -> bool:
    if request.headers.get("X-Requested-With") == "XMLHttpRequest":
        return True
    return request.accept_mimetypes.best == "application/json"


def json_or_redirect(success, message, category, redirect_endpoint, status=None, **extra):
    if wants_json():
        status = status or (200 if success else 400)
        return jsonify(success=success, message=message, category=category, **extra), status
    if success:
        flash(message, category)
    else:
        flash(message, category or "danger")
    return redirect(url_for(redirect_endpoint))


def first_form_error(form):
    for field_name, errors in form.errors.items():
        if errors:
            field = getattr(form, field_name, None)
            label = field.label.text if field is not None else field_name
            return f"{label}: {errors[0]}"
    return None
