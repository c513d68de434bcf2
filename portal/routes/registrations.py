from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required, current_user

from portal.capacity import CapacityUsage
from shared.outcomes import AdmissionErrorCode

bp = Blueprint('registrations', __name__)

ERROR_STATUS = {
    AdmissionErrorCode.NOT_APPROVED: 403,
    AdmissionErrorCode.MISSING_COLLEGE: 409,
    AdmissionErrorCode.EVENT_UNAVAILABLE: 404,
    AdmissionErrorCode.TEAM_SIZE_OUT_OF_RANGE: 400,
    AdmissionErrorCode.ALREADY_REGISTERED: 409,
    AdmissionErrorCode.COLLEGE_LIMIT_REACHED: 409,
    AdmissionErrorCode.STORAGE_UNAVAILABLE: 503,
}


def event_view(event, registered_ids, usage_by_event):
    data = event.to_dict()
    usage = CapacityUsage(used=usage_by_event.get(event.id, 0), limit=event.college_limit)
    data['registered'] = event.id in registered_ids
    data['college_usage'] = usage.to_dict()
    return data


def own_registrations():
    return current_app.admission.list_registrations_for_registrant(current_user.registrant_id)

# --- Routes ---

@bp.route('/api/v1/events', methods=['GET'])
@login_required
def list_events():
    """Active events with the caller's registration state and college usage."""
    events = current_app.catalog.list_active_events()
    registered_ids = {r.event_id for r in own_registrations()}
    usage_by_event = current_app.capacity.usage_by_event(current_user.college_id)

    return jsonify({
        'events': [event_view(e, registered_ids, usage_by_event) for e in events],
        'count': len(events)
    })

@bp.route('/api/v1/events/<event_id>', methods=['GET'])
@login_required
def get_event(event_id):
    event = current_app.catalog.get_event(event_id)
    if not event or not event.is_active:
        return jsonify({'error': 'Event not found'}), 404

    registered_ids = {r.event_id for r in own_registrations()}
    usage = current_app.capacity.usage_for(event, current_user.college_id)
    return jsonify(event_view(event, registered_ids, {event.id: usage.used}))

@bp.route('/api/v1/events/<event_id>/registrations', methods=['POST'])
@login_required
def register_for_event(event_id):
    """Register the caller's contingent for an event."""
    data = request.json or {}

    team_members = data.get('team_members')
    if team_members is not None and not isinstance(team_members, str):
        return jsonify({'error': 'team_members must be text'}), 400

    result = current_app.admission.request_registration(
        registrant_id=current_user.registrant_id,
        event_id=event_id,
        team_size=data.get('team_size'),
        team_members=team_members
    )

    if not result.admitted:
        body = result.error.to_dict()
        body['error'] = body.pop('message')
        return jsonify(body), ERROR_STATUS.get(result.error.code, 400)

    return jsonify({
        'message': 'Registration confirmed',
        'registration': result.registration.to_dict()
    }), 201

@bp.route('/api/v1/me/registrations', methods=['GET'])
@login_required
def my_registrations():
    registrations = own_registrations()
    return jsonify({
        'registrations': [r.to_dict() for r in registrations],
        'count': len(registrations)
    })
