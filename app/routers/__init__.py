# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - tasks.py: Task creation, estimates and cost calculation
# - payments.py: PayHere checkout, notifications and bank transfers
# - applications.py: Influencer applications and proofs
# - withdrawals.py: Influencer payouts
# - verification.py: Platform ownership verification codes
# - setup.py: Account setup wizard
# - admin.py: Accounting and bank transfer review
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import tasks
from . import payments
from . import applications
from . import withdrawals
from . import verification
from . import setup
from . import admin

__all__ = [
    "health",
    "tasks",
    "payments",
    "applications",
    "withdrawals",
    "verification",
    "setup",
    "admin",
]
