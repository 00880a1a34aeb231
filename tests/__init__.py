# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for lastline:
# - test_models.py: Severity, FailureRecord and InterceptorConfig
# - test_log_service.py: Log file probing and the failure log sink
# - test_response_service.py: Console channel and process termination
# - test_interceptor.py: Hooks, registration and the handle() pipeline
# - test_middleware.py: HTTP failure responses through the FastAPI host
# - test_config.py: Settings and create_interceptor()
# - test_run_guarded.py: End-to-end runs in child processes
#
# Run tests with: pytest
# =============================================================================
