# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Breez client core:
# - test_validation.py / test_pricing.py: pure functions
# - test_models.py / test_config.py: Pydantic models and settings
# - test_supabase_client.py: SDK wrapper error conversion
# - test_local_store.py / test_auth_state.py: auth-state cache
# - test_services.py / test_dashboard.py: access layer
# - test_upload_workflow.py / test_download_workflow.py: workflows
# - test_app_context.py: lifecycle wiring
#
# Run tests with: pytest
# =============================================================================
