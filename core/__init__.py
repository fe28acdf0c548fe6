# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the resource-sharing logic:
# - models/: Pydantic schemas for backend rows and workflow results
# - services/: Queries against the Supabase tables, storage and realtime
# - workflows/: Upload and download orchestration
#
# Code in this package talks to Supabase only through lib.supabase_client,
# which keeps it testable with a fake client.
# =============================================================================
