"""Swagger configuration for the API docs."""
