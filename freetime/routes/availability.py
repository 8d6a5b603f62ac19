# freetime/routes/availability.py
from datetime import timezone

from dateutil import parser as dparse
from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from freetime.services.errors import InvalidRange, OutOfBounds, WindowNotFound
from freetime.services.free_time import compute_mutual_free_time
from freetime.services.intervals import TimeInterval

availability_bp = Blueprint("availability", __name__)


# -----------------------------
# Helpers
# -----------------------------
class BadPayload(Exception):
    pass


def _store():
    return current_app.extensions["interval_store"]


def _payload():
    # Supports both form posts and JSON posts
    data = request.get_json(silent=True)
    if data is None:
        return request.form or {}
    if not isinstance(data, dict):
        raise BadPayload("Request body must be a JSON object")
    return data


def parse_instant(value, field):
    """ISO-8601 string -> aware UTC datetime. Naive strings are taken as UTC."""
    if not value or not isinstance(value, str):
        raise BadPayload(f"{field} is required")
    try:
        parsed = dparse.isoparse(value)
    except ValueError:
        raise BadPayload(f"{field} is not a valid ISO-8601 timestamp")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_id(data, field):
    value = data.get(field)
    # bool is an int subclass; 1.7 would silently truncate
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise BadPayload(f"{field} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadPayload(f"{field} must be an integer")


def parse_text(data, field):
    value = data.get(field)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise BadPayload(f"{field} must be a string")
    return value


def iso(value):
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def serialize_window(window):
    return {
        "id": window.id,
        "userId": window.user_id,
        "startTime": iso(window.interval.start),
        "endTime": iso(window.interval.end),
    }


def serialize_block(block):
    return {
        "id": block.id,
        "blockerId": block.owner_user_id,
        "blockeeId": block.peer_user_id,
        "blockerAvailabilityId": block.owner_window_id,
        "blockeeAvailabilityId": block.peer_window_id,
        "blockedStartTime": iso(block.interval.start),
        "blockedEndTime": iso(block.interval.end),
        "title": block.title,
        "description": block.description,
    }


@availability_bp.errorhandler(BadPayload)
def handle_bad_payload(e):
    return jsonify({"errors": [str(e)]}), 400


@availability_bp.errorhandler(InvalidRange)
def handle_invalid_range(e):
    return jsonify({"errors": [str(e)]}), 400


@availability_bp.errorhandler(OutOfBounds)
def handle_out_of_bounds(e):
    return jsonify({"error": str(e)}), 400


@availability_bp.errorhandler(WindowNotFound)
def handle_window_not_found(e):
    return jsonify({"error": "Availability not found for blocker or blockee."}), 404


@availability_bp.errorhandler(Exception)
def handle_server_error(e):
    if isinstance(e, HTTPException):
        return e
    current_app.logger.exception("Server Error: %s", e)
    return jsonify({"error": "Internal Server Error"}), 500


# -----------------------------
# Availability
# -----------------------------
@availability_bp.post("/availability")
def set_availability():
    data = _payload()
    user_id = parse_id(data, "userId")
    start = parse_instant(data.get("startTime"), "startTime")
    end = parse_instant(data.get("endTime"), "endTime")

    if start >= end:
        return jsonify({"errors": ["Start time must be before end time."]}), 400

    window, created = _store().save_availability(user_id, TimeInterval(start, end))
    message = "New availability created" if created else "Availability updated"
    return jsonify({"message": message, "availability": serialize_window(window)})


@availability_bp.get("/availability/overlap/<int:user_id1>/<int:user_id2>")
def get_overlap(user_id1, user_id2):
    store = _store()
    windows_1 = store.list_availability(user_id1)
    windows_2 = store.list_availability(user_id2)

    if not windows_1 or not windows_2:
        return jsonify({"error": "No availability found for one or both users."}), 404

    blocks_1 = [b.interval for b in store.list_blocks_owned_by(user_id1)]
    blocks_2 = [b.interval for b in store.list_blocks_owned_by(user_id2)]

    slots = compute_mutual_free_time(windows_1, blocks_1, windows_2, blocks_2)
    if not slots:
        return jsonify({"message": "No overlapping availability found."}), 404

    overlap = [
        {
            "blockerId": user_id1,
            "blockeeId": user_id2,
            "blockerAvailabilityId": slot.window_a_id,
            "blockeeAvailabilityId": slot.window_b_id,
            "startTime": iso(slot.interval.start),
            "endTime": iso(slot.interval.end),
        }
        for slot in slots
    ]
    return jsonify({"overlap": overlap})


@availability_bp.get("/availability/<int:user_id>")
def get_availability(user_id):
    store = _store()
    windows = store.list_availability(user_id)
    if not windows:
        return jsonify({"error": "No availability found for this user."}), 404

    blocked_by_window = {}
    for block in store.list_blocks_for_user(user_id):
        blocked_by_window.setdefault(block.window_for(user_id), []).append({
            "availabilityId": block.window_for(user_id),
            "blockedSlotId": block.id,
            "blockedStartTime": iso(block.interval.start),
            "blockedEndTime": iso(block.interval.end),
            "title": block.title,
            "description": block.description,
        })

    response = []
    for window in windows:
        entry = serialize_window(window)
        entry["blockedSlots"] = blocked_by_window.get(window.id, [])
        response.append(entry)
    return jsonify(response)


# -----------------------------
# Blocks
# -----------------------------
@availability_bp.post("/availability/block")
def block_slot():
    data = _payload()
    blocker_id = parse_id(data, "blockerId")
    blockee_id = parse_id(data, "blockeeId")
    blocker_window_id = parse_id(data, "blockerAvailabilityId")
    blockee_window_id = parse_id(data, "blockeeAvailabilityId")
    interval = TimeInterval(
        parse_instant(data.get("startTime"), "startTime"),
        parse_instant(data.get("endTime"), "endTime"),
    )

    blocker_side, blockee_side = _store().create_block(
        blocker_id,
        blockee_id,
        blocker_window_id,
        blockee_window_id,
        interval,
        title=parse_text(data, "title"),
        description=parse_text(data, "description"),
    )
    return jsonify({
        "blockedSlotUser1": serialize_block(blocker_side),
        "blockedSlotUser2": serialize_block(blockee_side),
    })


@availability_bp.delete("/availability/block/<int:block_id>")
def unblock_slot(block_id):
    if not _store().delete_block(block_id):
        return jsonify({"error": "Blocked slot not found."}), 404
    return jsonify({"message": "Slot unblocked successfully."})
