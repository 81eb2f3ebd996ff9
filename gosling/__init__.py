"""Create, name and renumber database migration files."""

__version__ = "3.2.0"
__all__ = ["__version__"]