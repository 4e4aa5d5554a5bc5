from flask import Blueprint, Flask, current_app, jsonify, request
from pydantic import ValidationError
from config import AppConfig
from schemas import TimetableRequest
from slot_allocator import SlotAllocator
from storage import RecordNotFoundError, TimetableStore
from log import init_logger

timetables_bp = Blueprint('timetables_bp', __name__, url_prefix='/api')

def get_store() -> TimetableStore:
    return current_app.extensions['timetable_store']

@timetables_bp.route('/timetables', methods=['POST'])
def create_timetable():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or 'payload' not in data:
        return jsonify({'error': 'Invalid payload'}), 400
    record_id = get_store().save(
        data['payload'],
        record_id=data.get('id'),
        teacher_name=data.get('teacherName')
    )
    return jsonify({'id': record_id}), 201

@timetables_bp.route('/timetables/<record_id>', methods=['GET'])
def get_timetable(record_id):
    try:
        record = get_store().get(record_id)
    except RecordNotFoundError:
        return jsonify({'error': 'Not found'}), 404
    return jsonify(record.model_dump(by_alias=True, mode='json')), 200

@timetables_bp.route('/timetables', methods=['GET'])
def list_timetables():
    items = [summary.model_dump(by_alias=True) for summary in get_store().list()]
    return jsonify({'items': items}), 200

@timetables_bp.route('/generate', methods=['POST'])
def generate():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid request'}), 400
    try:
        timetable_request = TimetableRequest.model_validate(data)
    except ValidationError as e:
        return jsonify({'error': 'Invalid request', 'details': e.errors(include_url=False, include_context=False)}), 400
    result = SlotAllocator(timetable_request).generate()
    return jsonify(result.model_dump(mode='json')), 200

def create_app(config: AppConfig | None = None, store: TimetableStore | None = None) -> Flask:
    config = config or AppConfig()
    app = Flask(__name__)
    app.config['PLANNER'] = config
    app.extensions['timetable_store'] = store if store is not None else TimetableStore()
    app.register_blueprint(timetables_bp)
    return app

if __name__ == '__main__':
    app_config = AppConfig()
    init_logger(debug=app_config.debug)
    create_app(app_config).run(host=app_config.api.host, port=app_config.api.port, debug=app_config.debug)
