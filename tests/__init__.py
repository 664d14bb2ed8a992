# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Pajama Party Platform API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_*_service.py: Service layer against in-memory store stand-ins
# - test_rate_limiter.py, test_throttle.py: Submission quotas
# - test_cors.py, test_countdown.py: Pure helpers in lib/
# - test_api.py: Endpoint tests through FastAPI's TestClient
#
# Run tests with: pytest
# =============================================================================
