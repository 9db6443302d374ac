"""
tenantscope ORM adapters.
"""

from tenantscope.adapters.sqlalchemy import SQLAlchemyScopeCompiler, scope_select

__all__ = [
    "SQLAlchemyScopeCompiler",
    "scope_select",
]
