"""
Core package for shared utilities.

Holds application settings and structured logging setup shared by the API,
services and storage layers.
"""
