"""
onepager - Owner One-Pager portfolio finance core

Pure computation behind the single-page rental portfolio dashboard.

Modules:
    - core: Logging, settings and exception types
    - domain: Pydantic records plus the OPEX and metrics calculators
    - application: Rent roll, portfolio, projection and export services
"""

__version__ = "1.4.0"
