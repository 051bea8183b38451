# pitch2angels/models/__init__.py

from .application import Application, REVIEW_STATUSES

__all__ = ["Application", "REVIEW_STATUSES"]
