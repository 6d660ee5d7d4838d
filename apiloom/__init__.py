"""apiloom - UML relationship diagrams for API documentation."""

__version__ = "1.0.0"
