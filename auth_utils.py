"""
Authentication utilities for the complaint management system
Verifies JWT bearer tokens issued by the college login service
"""
import jwt
from datetime import datetime, timedelta
from functools import wraps
from flask import request, jsonify, current_app, has_app_context

from config import JWT_SECRET_KEY, JWT_ALGORITHM

JWT_EXPIRY_HOURS = 24


def _secret_key():
    """Secret of the running app, falling back to the environment setting"""
    if has_app_context():
        return current_app.config.get('JWT_SECRET_KEY', JWT_SECRET_KEY)
    return JWT_SECRET_KEY


def generate_jwt_token(user_id, email, role):
    """Generate a JWT token for an authenticated user"""
    payload = {
        'user_id': user_id,
        'email': email,
        'role': role,
        'exp': datetime.utcnow() + timedelta(hours=JWT_EXPIRY_HOURS),
        'iat': datetime.utcnow()
    }
    token = jwt.encode(payload, _secret_key(), algorithm=JWT_ALGORITHM)
    return token


def decode_jwt_token(token):
    """Decode and validate a JWT token"""
    try:
        payload = jwt.decode(token, _secret_key(), algorithms=[JWT_ALGORITHM])
        return payload
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def get_request_user():
    """Return the token payload of the current request, or None"""
    auth_header = request.headers.get('Authorization', '')
    if not auth_header.startswith('Bearer '):
        return None
    return decode_jwt_token(auth_header.split(' ', 1)[1])


def require_auth(allowed_roles=None):
    """Decorator to protect routes with JWT authentication"""
    if allowed_roles is None:
        allowed_roles = ['student', 'faculty', 'admin']

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            auth_header = request.headers.get('Authorization')

            if not auth_header or not auth_header.startswith('Bearer '):
                return jsonify({'success': False, 'error': 'Missing or invalid authorization header'}), 401

            payload = get_request_user()

            if not payload:
                return jsonify({'success': False, 'error': 'Invalid or expired token'}), 401

            user_role = payload.get('role')
            if user_role not in allowed_roles:
                return jsonify({'success': False, 'error': 'Insufficient permissions'}), 403

            request.current_user = payload
            return f(*args, **kwargs)

        return decorated_function
    return decorator
