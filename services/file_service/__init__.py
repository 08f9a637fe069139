"""
Service layer for file uploads and download links.
"""
from .upload_service import FileUploadService

__all__ = [
    "FileUploadService"
]
