"""
Admin Dashboard Routes
======================

Authentication, dashboard page and the shared image upload endpoint.
"""

from urllib.parse import urlparse

from flask import render_template, request, redirect, url_for, flash, session, jsonify

from folio.core.logging_service import LoggingService
from folio.core.storage import UploadError, unique_filename, upload_file, validate_image
from . import dashboard_bp
from .database import AdminExists, admin_count, create_admin as create_admin_db, verify_admin
from .utils import admin_required, api_admin_required, editing_sessions

# Storage subfolders the editors may upload into
UPLOAD_FOLDERS = {
    'uploads',
    'about',
    'projects/thumbnails/4x3',
    'projects/thumbnails/3x4',
    'projects/details',
}


def _safe_next(next_page):
    """Return *next_page* only when it is a path on this site."""
    if not next_page or not next_page.startswith('/'):
        return None
    # '//host' and '/\host' are read by browsers as another site
    if next_page.startswith('//') or next_page.startswith('/\\') or urlparse(next_page).netloc:
        return None
    return next_page


@dashboard_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Admin login route"""
    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')

        if not email or not password:
            flash('Please enter both email and password', 'error')
            return render_template('dashboard/login.html'), 400

        admin = verify_admin(email, password)
        if admin:
            session['admin_id'] = admin[0]
            session['admin_email'] = admin[1]
            LoggingService.log_user_action('admin', 'login', user_id=admin[0])
            flash('Login successful', 'success')
            return redirect(_safe_next(request.args.get('next')) or url_for('admin.dashboard'))

        LoggingService.warning('security', 'Failed admin login', {'email': email})
        flash('Invalid email or password', 'error')
        return render_template('dashboard/login.html'), 401

    return render_template('dashboard/login.html')


@dashboard_bp.route('/logout')
def logout():
    """Admin logout route - also drops any open editing sessions"""
    admin_id = session.pop('admin_id', None)
    session.pop('admin_email', None)
    if admin_id is not None:
        editing_sessions().discard_owner(admin_id)
    flash('You have been logged out', 'info')
    return redirect(url_for('admin.login'))


@dashboard_bp.route('/create-admin', methods=['GET', 'POST'])
def create_admin():
    """Create new admin (only accessible by existing admin or if no admins exist)"""
    if admin_count() > 0 and 'admin_id' not in session:
        return redirect(url_for('admin.login'))

    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')
        confirm_password = request.form.get('confirm_password', '')

        if not all([email, password, confirm_password]):
            flash('All fields are required', 'error')
            return render_template('dashboard/create_admin.html'), 400

        if password != confirm_password:
            flash('Passwords do not match', 'error')
            return render_template('dashboard/create_admin.html'), 400

        if len(password) < 8:
            flash('Password must be at least 8 characters long', 'error')
            return render_template('dashboard/create_admin.html'), 400

        try:
            admin_id = create_admin_db(email, password)
        except AdminExists:
            flash('An admin with this email already exists', 'error')
            return render_template('dashboard/create_admin.html'), 409

        LoggingService.log_user_action('admin', f'created admin {email}', user_id=admin_id)
        flash(f'Admin {email} created successfully', 'success')
        return redirect(url_for('admin.dashboard'))

    return render_template('dashboard/create_admin.html')


@dashboard_bp.route('/')
@dashboard_bp.route('/dashboard')
@admin_required
def dashboard():
    """Admin dashboard - links to the About and Projects editors"""
    return render_template('dashboard/dashboard.html', admin_email=session.get('admin_email'))


@dashboard_bp.route('/status')
def status():
    """Check admin login status (API endpoint)"""
    if 'admin_id' in session:
        return jsonify({'logged_in': True, 'admin_email': session.get('admin_email')})
    return jsonify({'logged_in': False}), 401


@dashboard_bp.route('/upload-image', methods=['POST'])
@api_admin_required
def upload_image():
    """Upload an image and return its public URL"""
    folder = request.form.get('folder', 'uploads').strip('/')
    if folder not in UPLOAD_FOLDERS:
        return jsonify({'error': f'Unknown upload folder: {folder}'}), 400

    if 'image' not in request.files:
        return jsonify({'error': 'No image file provided'}), 400

    file = request.files['image']
    if file.filename == '':
        return jsonify({'error': 'No file selected'}), 400

    file_bytes = file.read()
    try:
        ext = validate_image(file_bytes, file.filename)
    except UploadError as e:
        return jsonify({'error': str(e)}), 400

    try:
        filename = unique_filename(ext)
        image_url = upload_file(file_bytes, filename, folder)
    except Exception as e:
        print(f"Error uploading image: {e}")
        LoggingService.log_error_with_traceback('storage', e, {'folder': folder})
        return jsonify({'error': 'Failed to upload image'}), 500

    return jsonify({'success': True, 'image_url': image_url, 'filename': filename})
