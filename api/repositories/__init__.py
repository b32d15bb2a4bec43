"""
Persistence adapters.

AccountRepository is the only place that builds SQL; it translates
SQLAlchemy failures into the api.core.errors taxonomy.
"""
