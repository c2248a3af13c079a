"""
Core package: power source registry, configuration, errors, and logging.
"""
