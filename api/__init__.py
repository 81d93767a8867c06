"""
FastAPI RESTful API for the Bookstore service.

This module provides:
- Book catalog browsing with filtering and pagination
- Admin-only create, update and delete of books
- Token issuance for registered users
- Uniform JSON error bodies
"""
