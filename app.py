#!/usr/bin/env python3
"""
MiLight Bridge - HTTP control of MiLight 2.4GHz lights
"""

from __future__ import annotations

import argparse
import time

from flask import Flask, jsonify

import config
from utils.logging import get_logger
from utils.milight import get_milight_client

logger = get_logger('milight.app')

app = Flask(__name__)

_start_time = time.time()


@app.route('/health')
def health_check():
    client = get_milight_client()
    return jsonify({
        'status': 'healthy',
        'version': config.VERSION,
        'uptime_seconds': round(time.time() - _start_time, 2),
        'radio': client.get_status(),
    })


def main() -> None:
    from routes import register_blueprints

    parser = argparse.ArgumentParser(description='MiLight HTTP bridge')
    parser.add_argument('--host', default=config.HOST, help='Address to bind')
    parser.add_argument('--port', type=int, default=config.PORT, help='Port to listen on')
    parser.add_argument('--debug', action='store_true', default=config.DEBUG, help='Enable Flask debug mode')
    args = parser.parse_args()

    register_blueprints(app)

    client = get_milight_client()
    client.transceiver.start()
    logger.info(f"Starting MiLight bridge on {args.host}:{args.port} ({client.transceiver.name} radio)")

    try:
        app.run(host=args.host, port=args.port, debug=args.debug, threaded=True, use_reloader=False)
    finally:
        client.transceiver.stop()


if __name__ == '__main__':
    main()
