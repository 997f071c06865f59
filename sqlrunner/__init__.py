"""
sqlrunner – execute raw SQL scripts statement by statement.
"""
from sqlrunner.runner import SQLRunner, literal_aware_statements, statements

__version__ = "0.3.0"

__all__ = ["SQLRunner", "statements", "literal_aware_statements", "__version__"]
