"""Submission intake, validation pipeline, and persistence."""
