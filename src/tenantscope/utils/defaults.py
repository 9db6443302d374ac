"""
Default profiles for tenantscope configuration.
"""

from dataclasses import dataclass
from typing import Literal

from tenantscope.logging.config import LogLevel


@dataclass(frozen=True)
class ScopeProfile:
    """
    Configuration profile controlling how scoping decisions are reported.

    Profiles never change which records a principal can see; they only
    control logging of the decisions.
    """

    mode: Literal["prod", "dev"]

    # Log every built predicate (the audit tuple principal + role + predicate)
    log_decisions: bool = True

    # Level used for scoped (non-bypass) predicates
    decision_log_level: LogLevel = LogLevel.DEBUG

    # Dump the full where-dict produced by the combinator
    log_combined_filters: bool = False

    # Warn when a non-admin principal asks for global access
    warn_on_ignored_global_access: bool = True

    # Warn when an access check resolves through a placeholder rule
    warn_on_placeholder_rules: bool = True


# Built-in profiles

PROFILE_PROD = ScopeProfile(
    mode="prod",
    log_decisions=True,
    decision_log_level=LogLevel.DEBUG,
    log_combined_filters=False,
    warn_on_ignored_global_access=True,
    warn_on_placeholder_rules=True,
)

PROFILE_DEV = ScopeProfile(
    mode="dev",
    log_decisions=True,
    decision_log_level=LogLevel.INFO,
    log_combined_filters=True,
    warn_on_ignored_global_access=True,
    warn_on_placeholder_rules=True,
)

_PROFILES = {
    "prod": PROFILE_PROD,
    "dev": PROFILE_DEV,
}


def get_profile(mode: str) -> ScopeProfile:
    """
    Get a built-in profile by mode name.

    Raises:
        KeyError: If the mode is not a built-in profile
    """
    try:
        return _PROFILES[mode.lower()]
    except KeyError:
        raise KeyError(
            f"Unknown profile mode '{mode}'. Available: {', '.join(_PROFILES)}"
        ) from None
