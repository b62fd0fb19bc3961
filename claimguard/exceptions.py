"""Exceptions raised by the ClaimGuard engine."""


class ClaimGuardError(Exception):
    """Base class for ClaimGuard errors."""


class UnsupportedCategoryError(ClaimGuardError, ValueError):
    """Raised when a bill category has no analyzer."""

    def __init__(self, category):
        self.category = category
        super().__init__(f"Unknown category: {category}")
