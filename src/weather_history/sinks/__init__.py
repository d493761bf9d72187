"""Sinks that persist weather records."""
