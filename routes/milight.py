"""MiLight gateway routes.

Provides endpoints for group and gateway control, raw frame injection and
capturing live gateway traffic.
"""

from __future__ import annotations

import select
import socket

from flask import Blueprint, Response, jsonify, request

import config
from utils.logging import get_logger
from utils.milight import (
    CaptureListener,
    InvalidRawFrameError,
    MalformedRequestError,
    RawFrameInjector,
    TransmissionPolicy,
    UnknownDeviceTypeError,
    dispatch,
    get_milight_client,
    normalize_gateway_request,
    normalize_group_request,
    parse_control_request,
    resolve_address,
)

logger = get_logger('milight.routes')

milight_bp = Blueprint('milight', __name__)


def _error(message: str, status_code: int = 400):
    return jsonify({'status': 'error', 'message': message}), status_code


def _client_connected() -> bool:
    """Check whether the requesting connection is still open.

    Peeks at the server socket without consuming data. Servers that do not
    expose their socket are assumed to keep the client connected.
    """
    sock = request.environ.get('werkzeug.socket')
    if sock is None:
        return True
    try:
        readable, _, _ = select.select([sock], [], [], 0)
        if not readable:
            return True
        return sock.recv(1, socket.MSG_PEEK) != b''
    except (OSError, ValueError):
        return False


def _current_policy() -> TransmissionPolicy:
    client = get_milight_client()
    return TransmissionPolicy(
        baseline=client.resend_count,
        group_repeat_factor=config.HTTP_REPEAT_FACTOR,
    )


# ------------------------------------------------------------------
# CONTROL
# ------------------------------------------------------------------

@milight_bp.route('/gateways/<device_id>/<device_type>/<group_id>', methods=['PUT'])
def update_group(device_id: str, device_type: str, group_id: str):
    try:
        control = parse_control_request(request.get_data())
        address = resolve_address(device_id, device_type, group_id)
    except (MalformedRequestError, UnknownDeviceTypeError) as e:
        logger.warning(f"Rejected group update: {e}")
        return _error(str(e))

    operations = normalize_group_request(address, control, _current_policy())
    dispatch(get_milight_client(), operations)
    return jsonify(True)


@milight_bp.route('/gateways/<device_id>/<device_type>', methods=['PUT'])
def update_gateway(device_id: str, device_type: str):
    try:
        control = parse_control_request(request.get_data())
        address = resolve_address(device_id, device_type)
    except (MalformedRequestError, UnknownDeviceTypeError) as e:
        logger.warning(f"Rejected gateway update: {e}")
        return _error(str(e))

    operations = normalize_gateway_request(address, control, _current_policy())
    dispatch(get_milight_client(), operations)
    return jsonify(True)


# ------------------------------------------------------------------
# RAW
# ------------------------------------------------------------------

@milight_bp.route('/send_raw/<device_type>', methods=['PUT'])
def send_raw(device_type: str):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return _error('Invalid JSON')

    num_repeats = data.get('num_repeats', data.get('numRepeats'))

    try:
        RawFrameInjector(get_milight_client()).send(device_type, data.get('packet'), num_repeats)
    except (UnknownDeviceTypeError, InvalidRawFrameError) as e:
        logger.warning(f"Rejected raw frame: {e}")
        return _error(str(e))

    return jsonify(True)


# ------------------------------------------------------------------
# CAPTURE
# ------------------------------------------------------------------

@milight_bp.route('/gateway_traffic/<device_type>')
def listen_gateway(device_type: str):
    listener = CaptureListener(get_milight_client(), poll_interval=config.CAPTURE_POLL_INTERVAL)

    try:
        report = listener.listen(device_type, cancel=lambda: not _client_connected())
    except UnknownDeviceTypeError as e:
        return _error(str(e))

    if report is None:
        # Client closed the connection; see "Capture cancellation response" in DESIGN.md
        return Response(status=499)

    return Response(report, mimetype='text/plain')
