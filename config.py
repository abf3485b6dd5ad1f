# Configuration for College Complaint Management System
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# JWT Authentication Configuration (tokens are issued by the college login service)
JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'college-complaints-secret-key-change-in-production')
JWT_ALGORITHM = 'HS256'
STAFF_ROLES = ['faculty', 'admin']

# Frontend Configuration (for CORS)
FRONTEND_URL = os.getenv('FRONTEND_URL', 'http://localhost:5173')

# Server Configuration
PORT = int(os.getenv('PORT', 5000))
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

# Database Configuration
COMPLAINTS_DB_PATH = os.getenv('COMPLAINTS_DB_PATH', 'data/complaints.db')
SEED_ON_STARTUP = os.getenv('SEED_ON_STARTUP', 'true').lower() == 'true'

# Attachment Configuration
UPLOAD_DIR = os.getenv('UPLOAD_DIR', os.path.join('uploads', 'complaints'))
ALLOWED_ATTACHMENT_TYPES = ['pdf', 'doc', 'docx', 'jpg', 'jpeg', 'png']
MAX_ATTACHMENT_MB = 5
MAX_ATTACHMENT_BYTES = MAX_ATTACHMENT_MB * 1024 * 1024

# Whole-request cap; larger bodies are rejected before the form is parsed
MAX_REQUEST_MB = 10

# Cap on any single non-file form field such as the description
MAX_FORM_FIELD_KB = 500
