"""
Storage Utility
===============

Shared image upload with cloud (S3-compatible Spaces) / local branching.
Uploads only ever hand back a public URL; callers store it as a plain field.
"""

import io
import os
import uuid

from flask import current_app
from PIL import Image, UnidentifiedImageError

from .config import get_config_value

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}

CONTENT_TYPES = {
    'jpg': 'image/jpeg', 'jpeg': 'image/jpeg',
    'png': 'image/png', 'gif': 'image/gif', 'webp': 'image/webp',
}


class UploadError(ValueError):
    """The uploaded file was rejected before reaching storage."""


def is_cloud_storage():
    """Check if using cloud storage"""
    return get_config_value('STORAGE_TYPE', 'local') == 'cloud'


def get_spaces_config():
    """Get S3-compatible Spaces configuration"""
    return {
        'region': get_config_value('SPACES_REGION'),
        'space_name': get_config_value('SPACES_NAME'),
        'access_key': get_config_value('SPACES_KEY'),
        'secret_key': get_config_value('SPACES_SECRET'),
    }


def file_extension(filename):
    return filename.rsplit('.', 1)[1].lower() if '.' in filename else ''


def validate_image(file_bytes, filename):
    """Reject non-images, unknown extensions and oversized files.

    Returns the lower-cased extension.
    """
    ext = file_extension(filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise UploadError('Invalid file type')

    max_bytes = int(get_config_value('UPLOAD_MAX_BYTES', 5 * 1024 * 1024))
    if len(file_bytes) > max_bytes:
        raise UploadError(f'File must be {max_bytes // (1024 * 1024)}MB or smaller')

    try:
        with Image.open(io.BytesIO(file_bytes)) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise UploadError('File is not a valid image') from e
    return ext


def unique_filename(ext):
    return f"{uuid.uuid4().hex}.{ext}"


def upload_file(file_bytes, filename, subfolder):
    """Upload file to cloud storage or local filesystem.

    Args:
        file_bytes: Raw bytes of the file.
        filename: Target filename (e.g. "abc123.jpg").
        subfolder: Subfolder path (e.g. "about", "projects/details").

    Returns:
        Public URL (cloud) or local path like "/static/about/abc.jpg" (local).
    """
    if is_cloud_storage():
        return _upload_to_spaces(file_bytes, filename, subfolder)
    return _save_locally(file_bytes, filename, subfolder)


def _upload_to_spaces(file_bytes, filename, subfolder):
    """Upload to an S3-compatible Space via boto3."""
    import boto3
    config = get_spaces_config()
    region = config['region']
    space_name = config['space_name']

    app_prefix = get_config_value('SPACES_FOLDER', 'uploads')
    object_key = f"{app_prefix}/{subfolder}/{filename}"
    content_type = CONTENT_TYPES.get(file_extension(filename), 'application/octet-stream')

    client = boto3.client(
        's3',
        region_name=region,
        endpoint_url=f"https://{region}.digitaloceanspaces.com",
        aws_access_key_id=config['access_key'],
        aws_secret_access_key=config['secret_key'],
    )

    client.put_object(
        Bucket=space_name,
        Key=object_key,
        Body=file_bytes,
        ACL='public-read',
        ContentType=content_type,
    )

    return f"https://{space_name}.{region}.digitaloceanspaces.com/{object_key}"


def _save_locally(file_bytes, filename, subfolder):
    """Save to local static folder."""
    upload_dir = os.path.join(current_app.static_folder, *subfolder.split('/'))
    os.makedirs(upload_dir, exist_ok=True)
    filepath = os.path.join(upload_dir, filename)
    with open(filepath, 'wb') as f:
        f.write(file_bytes)
    return f"/static/{subfolder}/{filename}"
