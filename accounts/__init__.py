"""
User accounts: identity store, password checks and bearer token issuance.
"""
