"""Command-line interface for traffic2postman."""
