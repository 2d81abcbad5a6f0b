from studio_admin.caller.approvals import RequestsApi
from studio_admin.caller.auth import AuthApi
from studio_admin.caller.client import ApiClient
from studio_admin.caller.resources import AdminApi

__all__ = ["AdminApi", "ApiClient", "AuthApi", "RequestsApi"]
