# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the campaign's business logic:
# - models/: Pydantic schemas for data validation
# - services/: Station search, dream ingestion, aggregation, impact metrics
#   and event signups
#
# Services receive their Supabase/Redis handles through their constructors
# and never import FastAPI routing code.
# =============================================================================
