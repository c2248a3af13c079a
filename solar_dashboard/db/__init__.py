"""
Database package: ORM models for the telemetry tables and async sessions.
"""
