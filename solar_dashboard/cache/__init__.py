"""
Cache package: best-effort Redis helpers for latest-reading lookups.
"""
