"""Rule-graph engine for declarative decision trees."""

__version__ = "0.1.0"
