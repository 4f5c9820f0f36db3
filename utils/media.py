"""
Media Module - Upload validation and uploads to the hosted media API (Cloudinary)
"""

import requests
from flask import current_app
from werkzeug.utils import secure_filename
from backend.errors import UploadError, UploadValidationError

MB = 1024 * 1024
UPLOAD_TIMEOUT = 60

# Destination folder and size ceilings per form
MEDIA_RULES = {
    'avatar': {'folder': 'portfolio/avatars', 'image_max': 5 * MB, 'allow_video': False},
    'project': {'folder': 'portfolio/projects', 'image_max': 10 * MB, 'video_max': 50 * MB, 'allow_video': True},
    'achievement': {'folder': 'portfolio/achievements', 'image_max': 10 * MB, 'allow_video': False},
}


def _file_size(file):
    """Size of an uploaded FileStorage without consuming it"""
    stream = file.stream
    position = stream.tell()
    stream.seek(0, 2)
    size = stream.tell()
    stream.seek(position)
    return size


def validate_media(mimetype, size, kind='avatar'):
    """
    Check MIME prefix and size before anything is sent

    Returns:
        str: 'image' or 'video', the resource type to upload as

    Raises:
        UploadValidationError: wrong type or too large
    """
    rules = MEDIA_RULES[kind]
    mimetype = (mimetype or '').lower()
    is_image = mimetype.startswith('image/')
    is_video = rules['allow_video'] and mimetype.startswith('video/')

    if not is_image and not is_video:
        if rules['allow_video']:
            raise UploadValidationError('Please select an image or video file')
        raise UploadValidationError('Please select an image file')

    limit = rules['video_max'] if is_video else rules['image_max']
    if size > limit:
        raise UploadValidationError(f'File size should be less than {limit // MB}MB')
    return 'video' if is_video else 'image'


def upload_media(file, kind='avatar'):
    """
    Validate and upload a werkzeug FileStorage, returning the hosted secure URL

    No retry: any failure is raised to the caller as UploadError.
    """
    resource_type = validate_media(file.mimetype, _file_size(file), kind)

    cloud_name = current_app.config.get('CLOUDINARY_CLOUD_NAME')
    upload_preset = current_app.config.get('CLOUDINARY_UPLOAD_PRESET')
    if not cloud_name or not upload_preset:
        raise UploadError('Media uploads are not configured (CLOUDINARY_CLOUD_NAME / CLOUDINARY_UPLOAD_PRESET)')

    url = f"{current_app.config['CLOUDINARY_API_BASE']}/{cloud_name}/{resource_type}/upload"
    filename = secure_filename(file.filename or 'upload')
    current_app.logger.info(f"Uploading {resource_type} {filename} to {MEDIA_RULES[kind]['folder']}")

    try:
        response = requests.post(
            url,
            data={'upload_preset': upload_preset, 'folder': MEDIA_RULES[kind]['folder']},
            files={'file': (filename, file.stream, file.mimetype)},
            timeout=UPLOAD_TIMEOUT,
        )
    except requests.RequestException as e:
        current_app.logger.error(f"Upload error: {str(e)}")
        raise UploadError(f'Upload failed: {str(e)}') from e

    try:
        body = response.json()
    except ValueError:
        body = {}

    if not response.ok:
        message = (body.get('error') or {}).get('message') or 'Upload failed'
        current_app.logger.error(f"Upload rejected ({response.status_code}): {message}")
        raise UploadError(message)

    secure_url = body.get('secure_url')
    if not secure_url:
        raise UploadError('Upload response did not include a URL')
    current_app.logger.info(f"Upload complete: {secure_url}")
    return secure_url


__all__ = ['MEDIA_RULES', 'validate_media', 'upload_media']
