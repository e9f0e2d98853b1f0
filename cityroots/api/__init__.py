"""REST API for the storefront."""

from .api_server import build_services, create_api_app, run_api_server

__all__ = ["build_services", "create_api_app", "run_api_server"]
