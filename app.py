#!/usr/bin/env python3
"""
Movement Validator - Web Interface

A Flask application exposing movement validation over HTTP.

POST /movements/validation with a JSON body of movements and balance
checkpoints answers 200 when the movements explain every checkpoint,
422 with the reasons when they do not, and 400 for malformed input.
"""
import logging
import os
from datetime import datetime

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from config import APP_NAME, APP_VERSION, MAX_CONTENT_LENGTH
from parsers.base_parser import InvalidInputError
from parsers.payload_parser import PayloadParser
from reconciler.balance_checker import MovementValidator


# =============================================================================
# Application Configuration
# =============================================================================

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

# Configure logging for production
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

validator = MovementValidator()


# =============================================================================
# Routes
# =============================================================================

@app.route('/movements/validation', methods=['POST'])
def validate_movements():
    """Validate movements against balance checkpoints."""
    payload = request.get_json(silent=True)
    if payload is None:
        return jsonify({
            'message': 'Invalid input',
            'errors': [{
                'path': '$',
                'type': 'invalid_json',
                'message': 'request body must be valid JSON',
            }],
        }), 400

    try:
        movements, balances = PayloadParser(payload).parse()
    except InvalidInputError as e:
        return jsonify({
            'message': 'Invalid input',
            'errors': [issue.to_dict() for issue in e.issues],
        }), 400

    result = validator.validate(movements, balances)

    if result.is_valid:
        return jsonify({'message': 'Accepted'}), 200

    logger.info(
        f"Validation failed for {len(movements)} movements and "
        f"{len(balances)} balances: {len(result.reasons)} reason(s)"
    )
    return jsonify({
        'message': 'Validation failed',
        'reasons': result.to_dict()['reasons'],
    }), 422


@app.route('/health')
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'app': APP_NAME,
        'version': APP_VERSION,
        'timestamp': datetime.now().isoformat()
    })


@app.errorhandler(413)
def payload_too_large(e):
    """Handle request body too large."""
    return jsonify({
        'message': f'Request too large. Maximum size is {MAX_CONTENT_LENGTH // (1024 * 1024)} MB.'
    }), 413


@app.errorhandler(HTTPException)
def http_error(e):
    """Render other HTTP errors as JSON."""
    return jsonify({'message': e.description}), e.code


@app.errorhandler(500)
def internal_error(e):
    """Handle internal server error."""
    logger.error(f"Internal server error: {e}")
    return jsonify({
        'message': 'An internal error occurred. Please try again.'
    }), 500


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    debug = os.environ.get('FLASK_DEBUG', 'false').lower() == 'true'

    logger.info(f"Starting {APP_NAME} v{APP_VERSION} on port {port}")

    app.run(host='0.0.0.0', port=port, debug=debug)
