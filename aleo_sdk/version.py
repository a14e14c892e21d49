"""
Version of the Aleo Python SDK (PEP 440).
Also sent in the default User-Agent header.
"""

# Bump this when publishing
__version__ = "0.4.0"

__all__ = ["__version__"]
