"""Hub upload engine — cookie/CSRF login followed by multipart scan upload."""

from hubscan.engines.hub_upload.client import UploadClient
from hubscan.engines.hub_upload.models import AuthSession, SessionCookie

__all__ = ["AuthSession", "SessionCookie", "UploadClient"]
