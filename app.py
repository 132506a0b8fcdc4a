from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_socketio import SocketIO, emit
from werkzeug.exceptions import HTTPException
import logging
import threading
import time

from ridematch import config
from ridematch.driver import Driver
from ridematch.errors import LocationNotFoundError, RideMatchError
from ridematch.system import RideShareSystem

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger("ridematch.app")

app = Flask(__name__)
app.secret_key = config.SECRET_KEY
CORS(app)
socketio = SocketIO(app, cors_allowed_origins="*", async_mode=config.SOCKETIO_ASYNC_MODE)

# Global system instance. The engine is single-threaded, so every request
# handler takes this lock for the whole call into it.
system = RideShareSystem()
system_lock = threading.Lock()


class InvalidPayload(Exception):
    pass


def _body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidPayload("JSON object body is required")
    return data


def _optional_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidPayload("Body must be a JSON object")
    return data


def _require_int(data, key):
    value = data.get(key)
    if value is None or isinstance(value, bool):
        raise InvalidPayload(f"{key} is required")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidPayload(f"{key} must be an integer")


def _require_bool(data, key):
    value = data.get(key)
    if not isinstance(value, bool):
        raise InvalidPayload(f"{key} is required and must be a boolean")
    return value


def _failure(message, status):
    return jsonify({'success': False, 'error': message}), status


def broadcast_system_update():
    """Broadcast analytics to all connected clients"""
    socketio.emit('system_update', {
        'type': 'analytics',
        'data': system.get_analytics(),
        'timestamp': time.time()
    })


@app.errorhandler(InvalidPayload)
def handle_bad_request(error):
    return _failure(str(error), 400)


@app.errorhandler(LocationNotFoundError)
def handle_not_found(error):
    return _failure(str(error), 404)


@app.errorhandler(RideMatchError)
def handle_contract_error(error):
    return _failure(str(error), 400)


@app.errorhandler(HTTPException)
def handle_http_error(error):
    return _failure(error.description, error.code)


@app.errorhandler(Exception)
def handle_unexpected(error):
    logger.exception("Unhandled error: %s", error)
    return _failure('Internal server error', 500)


# Health check
@app.route('/health')
@app.route('/api/health')
def health_check():
    with system_lock:
        return jsonify(system.get_health())


@app.route('/api/graph', methods=['GET'])
def get_graph():
    with system_lock:
        return jsonify({'success': True, 'data': system.graph.to_dict()})


@app.route('/api/nodes/<int:node_id>', methods=['GET'])
def get_node(node_id):
    with system_lock:
        node = system.graph.location(node_id)
        neighbors = system.graph.neighbors(node_id)
        return jsonify({
            'success': True,
            'data': {
                'node': node.to_dict(),
                'adjacentNodes': [road.to_dict() for road in neighbors]
            }
        })


@app.route('/api/path/shortest', methods=['POST'])
def shortest_path():
    data = _body()
    source = _require_int(data, 'source')
    destination = _require_int(data, 'destination')

    with system_lock:
        graph = system.graph
        if not graph.location_exists(source) or not graph.location_exists(destination):
            return _failure('Invalid source or destination node', 400)

        path = system.dispatch.paths.shortest_path(source, destination)
        if not path.found:
            return _failure('No path found', 404)

        payload = path.to_dict()
        payload['sourceNode'] = graph.location(source).to_dict()
        payload['destinationNode'] = graph.location(destination).to_dict()
        return jsonify({'success': True, 'data': payload})


@app.route('/api/drivers', methods=['GET'])
def list_drivers():
    available_only = request.args.get('available', '').lower() in ('1', 'true', 'yes')
    with system_lock:
        drivers = system.dispatch.available_drivers() if available_only else system.dispatch.all_drivers()
        return jsonify({'success': True, 'data': [d.to_dict() for d in drivers]})


@app.route('/api/drivers', methods=['POST'])
def add_driver():
    """Add a new driver"""
    data = _body()
    if not data.get('id'):
        raise InvalidPayload("id is required")
    _require_int(data, 'currentLocation')
    try:
        driver = Driver.from_dict(data)
    except (TypeError, ValueError) as e:
        raise InvalidPayload(f"Invalid driver: {e}")

    with system_lock:
        if not system.graph.location_exists(driver.current_location):
            return _failure(f"Location {driver.current_location} not found", 400)
        if not system.add_driver(driver):
            return _failure(f"Driver {driver.id} already exists", 409)
        logger.info("Added driver %s at location %d", driver.id, driver.current_location)
        broadcast_system_update()
        return jsonify({'success': True, 'data': system.dispatch.get_driver(driver.id).to_dict()}), 201


@app.route('/api/drivers/<driver_id>', methods=['GET'])
def get_driver(driver_id):
    with system_lock:
        driver = system.dispatch.get_driver(driver_id)
        if driver is None:
            return _failure('Driver not found', 404)
        return jsonify({'success': True, 'data': driver.to_dict()})


@app.route('/api/drivers/<driver_id>', methods=['DELETE'])
def remove_driver(driver_id):
    with system_lock:
        if not system.dispatch.remove_driver(driver_id):
            return _failure('Driver not found', 404)
        broadcast_system_update()
        return jsonify({'success': True, 'message': f'Driver {driver_id} removed'})


@app.route('/api/drivers/<driver_id>/location', methods=['PUT'])
def update_driver_location(driver_id):
    location = _require_int(_body(), 'location')

    with system_lock:
        if system.dispatch.get_driver(driver_id) is None:
            return _failure('Driver not found', 404)
        if not system.dispatch.update_driver_location(driver_id, location):
            return _failure(f'Location {location} not found', 400)
        broadcast_system_update()
        return jsonify({
            'success': True,
            'message': 'Driver location updated',
            'data': system.dispatch.get_driver(driver_id).to_dict()
        })


@app.route('/api/drivers/<driver_id>/availability', methods=['PUT'])
def update_driver_availability(driver_id):
    available = _require_bool(_body(), 'isAvailable')

    with system_lock:
        if not system.dispatch.set_driver_availability(driver_id, available):
            return _failure('Driver not found', 404)
        broadcast_system_update()
        return jsonify({
            'success': True,
            'message': 'Driver availability updated',
            'data': system.dispatch.get_driver(driver_id).to_dict()
        })


@app.route('/api/drivers/<driver_id>/complete', methods=['POST'])
def complete_ride(driver_id):
    data = _optional_body()
    dropoff = _require_int(data, 'dropoffLocation') if 'dropoffLocation' in data else None

    with system_lock:
        if system.dispatch.get_driver(driver_id) is None:
            return _failure('Driver not found', 404)
        if not system.dispatch.complete_ride(driver_id, dropoff):
            return _failure(f'Location {dropoff} not found', 400)
        broadcast_system_update()
        return jsonify({'success': True, 'data': system.dispatch.get_driver(driver_id).to_dict()})


def _ride_request_from_body():
    data = _body()
    passenger_id = data.get('passengerId')
    if not passenger_id:
        raise InvalidPayload('passengerId, pickupLocation, and destinationLocation are required')
    pickup = _require_int(data, 'pickupLocation')
    destination = _require_int(data, 'destinationLocation')
    return str(passenger_id), pickup, destination


@app.route('/api/rides/find', methods=['POST'])
def find_ride():
    """Match a ride immediately (no queue, no demand window)"""
    passenger_id, pickup, destination = _ride_request_from_body()

    with system_lock:
        ride_request = system.new_request(passenger_id, pickup, destination)
        logger.info("Ride request %s: passenger %s, %d -> %d", ride_request.request_id, passenger_id, pickup, destination)
        match = system.dispatch.find_ride(ride_request)

        if not match.success:
            logger.warning("Ride request %s unmatched: %s", ride_request.request_id, match.message)
            return jsonify(match.to_dict()), 404

        socketio.emit('ride_matched', match.to_dict())
        broadcast_system_update()
        return jsonify(match.to_dict())


@app.route('/api/rides/request', methods=['POST'])
def enqueue_ride():
    """Queue a ride request for later processing"""
    passenger_id, pickup, destination = _ride_request_from_body()

    with system_lock:
        ride_request = system.new_request(passenger_id, pickup, destination)
        system.dispatch.enqueue(ride_request)
        broadcast_system_update()
        return jsonify({
            'success': True,
            'data': ride_request.to_dict(),
            'queueSize': system.dispatch.queue_size()
        }), 202


@app.route('/api/rides/process', methods=['POST'])
def process_next_ride():
    with system_lock:
        result = system.dispatch.process_next()
        if result.success:
            socketio.emit('ride_matched', result.to_dict())
        broadcast_system_update()
        return jsonify({
            'success': result.success,
            'data': result.to_dict(),
            'queueSize': system.dispatch.queue_size()
        })


@app.route('/api/rides/dispatch', methods=['POST'])
def dispatch_ride():
    """Process a ride request directly, bypassing the queue"""
    passenger_id, pickup, destination = _ride_request_from_body()

    with system_lock:
        ride_request = system.new_request(passenger_id, pickup, destination)
        result = system.dispatch.process_request(ride_request)
        if result.success:
            socketio.emit('ride_matched', result.to_dict())
            broadcast_system_update()
        return jsonify({'success': result.success, 'data': result.to_dict()})


@app.route('/api/demand', methods=['GET'])
def analyze_demand():
    with system_lock:
        return jsonify({'success': True, 'data': system.dispatch.analyze_demand().to_dict()})


@app.route('/api/analytics', methods=['GET'])
def get_analytics():
    """Get system analytics"""
    with system_lock:
        return jsonify({'success': True, 'analytics': system.get_analytics()})


@app.route('/api/queue', methods=['GET'])
def queue_size():
    with system_lock:
        return jsonify({'success': True, 'queueSize': system.dispatch.queue_size()})


@app.route('/api/system/state', methods=['GET'])
def get_system_state():
    """Get current system state"""
    with system_lock:
        return jsonify({'success': True, 'system': system.get_state()})


@app.route('/api/system/reset', methods=['POST'])
def reset_system():
    data = _optional_body()
    seed = _require_int(data, 'seed') if 'seed' in data else None

    with system_lock:
        system.reset(seed)
        broadcast_system_update()
        return jsonify({'success': True, 'message': 'System reset successfully'})


# WebSocket event handlers
@socketio.on('connect')
def handle_connect():
    logger.info("Client connected")
    emit('connected', {'message': 'Connected to Ride Dispatch', 'timestamp': time.time()})


@socketio.on('disconnect')
def handle_disconnect(reason=None):
    logger.info("Client disconnected")


if __name__ == '__main__':
    logger.info("Starting Ride Dispatch server on %s:%d", config.HOST, config.PORT)
    socketio.run(app,
                 debug=False,
                 host=config.HOST,
                 port=config.PORT,
                 allow_unsafe_werkzeug=True)
