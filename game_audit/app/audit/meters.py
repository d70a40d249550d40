from app.models.audit import AuditEntry


def previous_audit(machine_no, location_id, before):
    """Latest entry for the machine at the location strictly before ``before``."""
    return (
        AuditEntry.query
        .filter(AuditEntry.machine_no == machine_no)
        .filter(AuditEntry.location_id == location_id)
        .filter(AuditEntry.entry_date < before)
        .order_by(AuditEntry.entry_date.desc(), AuditEntry.id.desc())
        .first()
    )


def previous_meters(machine_no, location_id, before):
    """``(prev_in, prev_out)`` carried over from the last audit, or ``None``."""
    entry = previous_audit(machine_no, location_id, before)
    if entry is None:
        return None
    return entry.cur_in, entry.cur_out
