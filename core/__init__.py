# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic behind the API:
# - models/: Pydantic schemas for data validation
# - services/: Task, payment, application, withdrawal and admin services
#
# Services talk to Supabase through lib/supabase_client.py and raise the
# structured exceptions from app/exceptions.py. Pricing and signing math
# lives in lib/ so it stays framework-free.
# =============================================================================
