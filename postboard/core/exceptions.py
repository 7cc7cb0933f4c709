"""
Exception hierarchy for Postboard
"""


class PostboardError(Exception):
    """Base class for all Postboard errors"""
    pass


class ConfigurationError(PostboardError):
    """Settings are missing or inconsistent"""
    pass


class PostServiceError(PostboardError):
    """Post service request failed (transport, HTTP status or GraphQL errors)"""

    def __init__(self, message: str, error_type: str = None):
        super().__init__(message)
        self.error_type = error_type


class PostServiceUnauthorized(PostServiceError):
    """Caller has no valid session for a write"""
    pass


class PostServiceForbidden(PostServiceError):
    """Caller is authenticated but not allowed to modify the resource"""
    pass


class PostNotFound(PostServiceError):
    """No post with the requested id"""
    pass


class IdentityError(PostboardError):
    """Identity provider request failed"""
    pass


class NoSessionError(IdentityError):
    """No active session; an expected, non-fatal condition"""
    pass
