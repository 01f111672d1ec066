"""
Base service class.
Services hold the business rules and return results wrapped in response envelopes.
"""

from abc import ABC


class BaseService(ABC):
    """Common parent of the contact and health services."""
    pass
