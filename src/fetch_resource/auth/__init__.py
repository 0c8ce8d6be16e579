from .auth_handler import BearerAuthHandler, merge_auth_headers

__all__ = ["BearerAuthHandler", "merge_auth_headers"]
