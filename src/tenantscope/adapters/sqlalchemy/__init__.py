"""
SQLAlchemy integration for tenantscope.

Compiles tenant predicates into SQLAlchemy 2.0 clauses.
"""

from tenantscope.adapters.sqlalchemy.compiler import SQLAlchemyScopeCompiler, scope_select

__all__ = [
    "SQLAlchemyScopeCompiler",
    "scope_select",
]
