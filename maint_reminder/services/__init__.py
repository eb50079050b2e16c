"""Evaluation, composition and scheduling services."""
