"""
Services package: telemetry reading, aggregation, and derived metrics.
"""
