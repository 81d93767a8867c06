"""
Shared infrastructure: configuration, logging and database access.
"""
