"""Command line interface for assessment-kit."""
