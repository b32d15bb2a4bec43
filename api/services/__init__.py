"""
Use cases for the accounts API.

Services orchestrate the repository to implement the business rules (signup,
login, activation after payment). Routers call these instead of touching the
database session directly.
"""
