"""Book catalogue service: books identified by ISBN, served over FastAPI."""

__version__ = "1.0.0"
