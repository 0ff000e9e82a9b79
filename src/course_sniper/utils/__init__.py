"""Logging, console and environment helpers."""
