# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the BrandSync API:
# - test_views.py, test_deadlines.py, test_pricing.py, test_payhere.py,
#   test_youtube.py:
#   Unit tests for the pure lib/ modules
# - test_models.py: Unit tests for Pydantic model validation
# - test_*_service.py: Service tests against a mocked Supabase client
# - test_api.py, test_auth.py: HTTP tests through FastAPI's TestClient
# - test_workers.py, test_notifications.py: Celery tasks and delivery
#
# Run tests with: pytest
# =============================================================================
