"""
FastAPI routers grouped by concern (accounts, payment hooks).

Each module exposes an APIRouter included by api.app. Routers stay thin:
they read the request and delegate to api.services.
"""
