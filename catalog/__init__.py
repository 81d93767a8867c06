"""
Book catalog domain: entity model, persistence and business rules.
"""
