from flask import Blueprint, request, jsonify, current_app

from portal.auth import require_role
from portal.models import ROLE_ADMIN

bp = Blueprint('admin', __name__, url_prefix='/api/v1/admin')

# ==================== Registrants ====================

@bp.route('/registrants', methods=['GET'])
@require_role(ROLE_ADMIN)
def list_registrants():
    status = request.args.get('status')
    limit = request.args.get('limit', 200, type=int)
    offset = request.args.get('offset', 0, type=int)

    registrants = current_app.directory.list_registrants(status=status, limit=limit, offset=offset)

    return jsonify({
        'registrants': [r.to_dict(reveal_phone=True) for r in registrants],
        'count': len(registrants),
        'limit': limit,
        'offset': offset
    })

@bp.route('/registrants/<registrant_id>/approve', methods=['POST'])
@require_role(ROLE_ADMIN)
def approve_registrant(registrant_id):
    data = request.json or {}

    for field in ('college_id', 'contingent_code'):
        if data.get(field) is not None and not isinstance(data.get(field), str):
            return jsonify({'error': f'{field} must be text'}), 400

    success, message = current_app.directory.approve(
        registrant_id,
        college_id=data.get('college_id'),
        contingent_code=data.get('contingent_code')
    )
    if not success:
        return jsonify({'error': message}), 400

    registrant = current_app.directory.get_registrant(registrant_id)
    return jsonify({
        'message': message,
        'registrant': registrant.to_dict(reveal_phone=True)
    })

@bp.route('/registrants/<registrant_id>/reject', methods=['POST'])
@require_role(ROLE_ADMIN)
def reject_registrant(registrant_id):
    success, message = current_app.directory.reject(registrant_id)
    if not success:
        return jsonify({'error': message}), 400

    registrant = current_app.directory.get_registrant(registrant_id)
    return jsonify({
        'message': message,
        'registrant': registrant.to_dict(reveal_phone=True)
    })

# ==================== Colleges ====================

@bp.route('/colleges', methods=['GET'])
@require_role(ROLE_ADMIN)
def list_colleges():
    colleges = current_app.directory.list_colleges()
    return jsonify({
        'colleges': [c.to_dict() for c in colleges],
        'count': len(colleges)
    })

@bp.route('/colleges', methods=['POST'])
@require_role(ROLE_ADMIN)
def create_college():
    data = request.json or {}

    name = data.get('name')
    if not name:
        return jsonify({'error': 'College name is required'}), 400

    for field in ('name', 'college_id'):
        if data.get(field) is not None and not isinstance(data.get(field), str):
            return jsonify({'error': f'{field} must be text'}), 400

    college, message = current_app.directory.create_college(name, college_id=data.get('college_id'))
    if not college:
        return jsonify({'error': message}), 400

    return jsonify({'message': message, 'college': college.to_dict()}), 201

# ==================== Events ====================

@bp.route('/events', methods=['POST'])
@require_role(ROLE_ADMIN)
def create_event():
    data = request.json or {}

    name = data.get('name')
    if not name:
        return jsonify({'error': 'Event name is required'}), 400

    for field in ('name', 'description', 'event_id'):
        if data.get(field) is not None and not isinstance(data.get(field), str):
            return jsonify({'error': f'{field} must be text'}), 400

    event, message = current_app.catalog.create_event(
        name=name,
        min_team_size=data.get('min_team_size', 1),
        max_team_size=data.get('max_team_size', 1),
        college_limit=data.get('college_limit'),
        description=data.get('description'),
        is_active=data.get('is_active', True),
        event_id=data.get('event_id')
    )
    if not event:
        return jsonify({'error': message}), 400

    return jsonify({'message': message, 'event': event.to_dict()}), 201

@bp.route('/events/<event_id>/deactivate', methods=['POST'])
@require_role(ROLE_ADMIN)
def deactivate_event(event_id):
    success, message = current_app.catalog.set_active(event_id, False)
    if not success:
        return jsonify({'error': message}), 404
    return jsonify({'message': message})
