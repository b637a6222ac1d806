"""
Product image storage.

Images are uploaded to Azure Blob Storage when AZURE_STORAGE_ACCOUNT_NAME
and AZURE_STORAGE_ACCOUNT_KEY are set. Without an account they are written
to MEDIA_ROOT through Django's default storage, which is what local
development and the test suite use.
"""
import logging
import os
import time
import uuid

from azure.core.exceptions import ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContentSettings
from django.conf import settings
from django.core.files.storage import default_storage

logger = logging.getLogger(__name__)

PRODUCT_IMAGE_FOLDER = 'products'


def azure_configured():
    return bool(settings.AZURE_STORAGE_ACCOUNT_NAME and settings.AZURE_STORAGE_ACCOUNT_KEY)


def build_storage_path(filename):
    """products/<random>_<millis>.<ext>, keeping the upload's extension"""
    ext = os.path.splitext(filename or '')[1].lstrip('.').lower() or 'jpg'
    token = uuid.uuid4().hex[:12]
    return f"{PRODUCT_IMAGE_FOLDER}/{token}_{int(time.time() * 1000)}.{ext}"


def _blob_client(path):
    folder = settings.AZURE_BLOB_FOLDER
    if folder and not folder.endswith('/'):
        folder += '/'
    connection_string = (
        f"DefaultEndpointsProtocol=https;AccountName={settings.AZURE_STORAGE_ACCOUNT_NAME};"
        f"AccountKey={settings.AZURE_STORAGE_ACCOUNT_KEY};EndpointSuffix=core.windows.net"
    )
    blob_service_client = BlobServiceClient.from_connection_string(connection_string)
    return blob_service_client.get_blob_client(
        container=settings.AZURE_STORAGE_CONTAINER,
        blob=f"{folder}{path}",
    )


def save_product_image(uploaded_file):
    """Store an uploaded image and return (storage_path, public_url)"""
    path = build_storage_path(uploaded_file.name)

    if azure_configured():
        blob_client = _blob_client(path)
        uploaded_file.seek(0)
        blob_client.upload_blob(
            uploaded_file,
            overwrite=False,
            content_settings=ContentSettings(content_type=getattr(uploaded_file, 'content_type', None)),
        )
        logger.info(f"Uploaded product image blob {blob_client.blob_name}")
        return path, blob_client.url

    path = default_storage.save(path, uploaded_file)
    logger.info(f"Stored product image at {path}")
    return path, default_storage.url(path)


def delete_product_image(path):
    """Remove a stored image; missing files are not an error"""
    if not path:
        return

    if azure_configured():
        try:
            _blob_client(path).delete_blob()
        except ResourceNotFoundError:
            logger.warning(f"Product image blob {path} was already gone")
            return
        logger.info(f"Deleted product image blob {path}")
        return

    if default_storage.exists(path):
        default_storage.delete(path)
        logger.info(f"Deleted product image {path}")
    else:
        logger.warning(f"Product image {path} was already gone from storage")
