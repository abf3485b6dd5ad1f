"""
Flask Web Application for College Complaint Management
Provides API endpoints for taxonomy options, complaint intake and staff status updates
"""
import logging

from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge

import config
from auth_utils import require_auth, get_request_user
from complaints.errors import ComplaintError, FieldTooLarge, FileTooLarge, StoreUnavailable
from complaints.option_store import OptionStore
from complaints.complaint_db import ComplaintDatabase
from complaints.taxonomy import TaxonomyResolver, SOURCE_FALLBACK
from complaints.taxonomy_config import OptionType
from complaints.intake import ComplaintIntake
from complaints.seeding import seed_default_options, ensure_department_codes
from services.attachment_service import AttachmentService

logger = logging.getLogger('app')


def serialize_option(option: dict) -> dict:
    """Client view of an option: value, plus code for departments that have one"""
    data = {'value': option['value']}
    if option['type'] == OptionType.DEPARTMENT and option.get('code'):
        data['code'] = option['code']
    return data


def error_response(error: ComplaintError):
    return jsonify(error.to_dict()), error.http_status


def internal_error(context: str, e: Exception):
    logger.exception(f"{context} | {e}")
    return jsonify({'success': False, 'error': 'Internal server error', 'code': 'internal_error'}), 500


def create_app(overrides: dict = None) -> Flask:
    """
    Build the Flask app.

    Args:
        overrides: config values replacing the environment defaults
            (COMPLAINTS_DB_PATH, UPLOAD_DIR, SEED_ON_STARTUP, JWT_SECRET_KEY, ...)
    """
    app = Flask(__name__)
    app.config.update(
        COMPLAINTS_DB_PATH=config.COMPLAINTS_DB_PATH,
        UPLOAD_DIR=config.UPLOAD_DIR,
        MAX_ATTACHMENT_BYTES=config.MAX_ATTACHMENT_BYTES,
        ALLOWED_ATTACHMENT_TYPES=config.ALLOWED_ATTACHMENT_TYPES,
        SEED_ON_STARTUP=config.SEED_ON_STARTUP,
        JWT_SECRET_KEY=config.JWT_SECRET_KEY,
        MAX_CONTENT_LENGTH=config.MAX_REQUEST_MB * 1024 * 1024,
        MAX_FORM_MEMORY_SIZE=config.MAX_FORM_FIELD_KB * 1024,
    )
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format='%(asctime)s %(name)s %(levelname)s %(message)s'
    )

    # Configure CORS for React frontend
    cors_settings = {"origins": [config.FRONTEND_URL, "http://localhost:5173", "http://localhost:3000"]}
    CORS(app,
         resources={r"/options*": cors_settings, r"/complaints*": cors_settings},
         supports_credentials=True,
         allow_headers=["Content-Type", "Authorization"],
         expose_headers=["X-Options-Source"],
         methods=["GET", "POST", "PUT", "OPTIONS"])

    db_path = app.config['COMPLAINTS_DB_PATH']
    option_store = OptionStore(db_path)
    complaint_db = ComplaintDatabase(db_path)

    # A store that is down at startup is not fatal: lookups fall back, submissions fail with 503
    try:
        option_store.initialize()
        complaint_db.initialize()
        if app.config['SEED_ON_STARTUP']:
            seed_default_options(option_store)
            ensure_department_codes(option_store)
    except StoreUnavailable:
        logger.warning(f"STORE_INIT_FAIL | {db_path} | serving fallback taxonomy")

    resolver = TaxonomyResolver(option_store)
    attachments = AttachmentService(
        upload_dir=app.config['UPLOAD_DIR'],
        max_bytes=app.config['MAX_ATTACHMENT_BYTES'],
        allowed_types=app.config['ALLOWED_ATTACHMENT_TYPES'],
    )
    intake = ComplaintIntake(resolver, complaint_db, attachments)

    app.extensions['complaints'] = {
        'option_store': option_store,
        'complaint_db': complaint_db,
        'resolver': resolver,
        'intake': intake,
    }

    def too_large_error() -> ComplaintError:
        """A body over MAX_CONTENT_LENGTH means an oversize file; otherwise one form field was too long"""
        limit = app.config.get('MAX_CONTENT_LENGTH')
        if limit and request.content_length and request.content_length > limit:
            return FileTooLarge(app.config['MAX_ATTACHMENT_BYTES'])
        return FieldTooLarge(app.config['MAX_FORM_MEMORY_SIZE'])

    @app.errorhandler(RequestEntityTooLarge)
    def request_too_large(e):
        return error_response(too_large_error())

    # ============================================
    # Taxonomy Option Endpoints
    # ============================================

    @app.route('/options', methods=['GET'])
    def get_options():
        """List taxonomy options; without a type, all categories and departments"""
        option_type = request.args.get('type', '').strip()
        parent_category = request.args.get('parentCategory', '').strip()

        if not option_type:
            categories, cat_source = resolver.list_options_with_source(OptionType.CATEGORY)
            departments, dept_source = resolver.list_options_with_source(OptionType.DEPARTMENT)
            source = SOURCE_FALLBACK if SOURCE_FALLBACK in (cat_source, dept_source) else cat_source
            payload = [dict(serialize_option(opt), type=opt['type']) for opt in categories + departments]
            response = jsonify(payload)
            response.headers['X-Options-Source'] = source
            return response

        if option_type not in OptionType.ALL_TYPES:
            return jsonify({
                'success': False,
                'error': f"Invalid type. Must be one of: {', '.join(OptionType.ALL_TYPES)}",
                'code': 'invalid_option_type'
            }), 400

        if option_type == OptionType.SUB_CATEGORY:
            if not parent_category:
                return jsonify({
                    'success': False,
                    'error': 'parentCategory is required when type=subCategory',
                    'code': 'missing_parent_category'
                }), 400
            options, source = resolver.list_options_with_source(option_type, parent_category.lower())
        else:
            options, source = resolver.list_options_with_source(option_type)

        response = jsonify([serialize_option(opt) for opt in options])
        response.headers['X-Options-Source'] = source
        return response

    # ============================================
    # Complaint Endpoints
    # ============================================

    @app.route('/complaints/priority', methods=['GET'])
    def preview_priority():
        """Priority the form displays for a category/subcategory selection"""
        return jsonify(intake.preview_priority(
            request.args.get('category', ''),
            request.args.get('subCategory', '')
        ))

    @app.route('/complaints', methods=['POST'])
    def submit_complaint():
        """Accept a multipart complaint submission"""
        try:
            submission = request.form.to_dict()
            submission['file'] = request.files.get('file')

            complaint = intake.submit(submission)

            return jsonify({
                'success': True,
                'trackingId': complaint['trackingId'],
                'priority': complaint['priority'],
                'status': complaint['status'],
                'message': f"Complaint submitted successfully. Your tracking ID is {complaint['trackingId']}"
            }), 201

        except ComplaintError as e:
            return error_response(e)
        except RequestEntityTooLarge:
            return error_response(too_large_error())
        except Exception as e:
            return internal_error('COMPLAINT_SUBMIT_FAIL', e)

    @app.route('/complaints/by-tracking/<tracking_id>', methods=['GET'])
    def get_complaint_by_tracking_id(tracking_id):
        """Look up a complaint by the tracking ID given to the student"""
        try:
            return jsonify(complaint_db.get_by_tracking_id(tracking_id))
        except ComplaintError as e:
            return error_response(e)
        except Exception as e:
            return internal_error('COMPLAINT_TRACK_FAIL', e)

    @app.route('/complaints', methods=['GET'])
    def list_complaints():
        """Complaints of one email; the full list is staff only"""
        try:
            email = request.args.get('email', '').strip()
            if email:
                return jsonify(complaint_db.get_complaints_by_email(email))

            user = get_request_user()
            if not user:
                return jsonify({'success': False, 'error': 'Authentication required'}), 401
            if user.get('role') not in config.STAFF_ROLES:
                return jsonify({'success': False, 'error': 'Insufficient permissions'}), 403

            status = request.args.get('status', '').strip().lower() or None
            return jsonify(complaint_db.get_all_complaints(status_filter=status))

        except ComplaintError as e:
            return error_response(e)
        except Exception as e:
            return internal_error('COMPLAINT_LIST_FAIL', e)

    @app.route('/complaints/<int:complaint_id>', methods=['GET'])
    def get_complaint(complaint_id):
        try:
            return jsonify(complaint_db.get_complaint(complaint_id))
        except ComplaintError as e:
            return error_response(e)
        except Exception as e:
            return internal_error('COMPLAINT_FETCH_FAIL', e)

    @app.route('/complaints/<int:complaint_id>/status', methods=['PUT'])
    @require_auth(config.STAFF_ROLES)
    def update_complaint_status(complaint_id):
        """Staff status transition"""
        try:
            data = request.get_json(silent=True) or {}
            complaint = complaint_db.update_status(complaint_id, data.get('status', ''))
            logger.info(f"STATUS_CHANGED_BY | {complaint_id} | {request.current_user.get('email')}")
            return jsonify({'success': True, 'complaint': complaint})
        except ComplaintError as e:
            return error_response(e)
        except Exception as e:
            return internal_error('COMPLAINT_STATUS_FAIL', e)

    return app


if __name__ == '__main__':
    print("=" * 60)
    print("  College Complaint Management System")
    print("=" * 60)
    print(f"\n🌐 Starting server at: http://localhost:{config.PORT}")
    print("📝 Press Ctrl+C to stop the server\n")
    print("=" * 60)

    create_app().run(debug=False, use_reloader=False, host='0.0.0.0', port=config.PORT)
