"""Streaming shape profiler for JSON-per-line files."""
