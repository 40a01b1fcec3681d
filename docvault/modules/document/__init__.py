"""Classified documents: model, validation, repository and service."""
