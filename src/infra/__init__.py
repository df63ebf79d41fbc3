"""Infrastructure layer package.

Implements Port interfaces with concrete PostgreSQL adapters.
The RBAC core and the tool layer MUST NOT import from this package directly.
"""
