# =============================================================================
# app/ - Application Package
# =============================================================================
# This package wires the client core together:
# - main.py: AppContext (build / start / shutdown) and logging setup
# - config.py: Environment variable loading and settings
# - exceptions.py: Error taxonomy
# - auth/: Auth-state cache and its warm-start local store
#
# Business logic lives in core/; pure helpers in lib/.
# =============================================================================
