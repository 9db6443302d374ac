"""
tenantscope configuration profiles.
"""

from tenantscope.utils.defaults import PROFILE_DEV, PROFILE_PROD, ScopeProfile, get_profile

__all__ = [
    "ScopeProfile",
    "PROFILE_PROD",
    "PROFILE_DEV",
    "get_profile",
]
