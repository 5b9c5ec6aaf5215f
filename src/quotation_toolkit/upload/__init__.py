"""
Upload Package

Delivery of rendered quotations to remote storage. See drive.py.
"""

from .drive import DEFAULT_FOLDER, DriveUploader, UploadError

__all__ = ["DEFAULT_FOLDER", "DriveUploader", "UploadError"]
