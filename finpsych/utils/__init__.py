"""Logging and concurrency helpers for the scoring scripts."""
