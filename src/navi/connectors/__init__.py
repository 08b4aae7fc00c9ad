"""Presentation front-ends."""
