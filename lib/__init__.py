# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - views.py: View count shorthand parsing/formatting ("10K" <-> 10000)
# - deadlines.py: Deadline options and due date resolution
# - pricing.py: Campaign cost and influencer payout calculator
# - payhere.py: PayHere checkout/notification signatures
# - notifications.py: Email and SMS senders
# - supabase_client.py: Typed Supabase wrapper for database reads
# - utils.py: Shared utilities (UUID normalization, name splitting)
#
# The pricing, deadline, view and signature modules are pure and can be
# tested in isolation.
# =============================================================================

from lib.views import ViewCountParseError, format_view_count, parse_view_count
from lib.deadlines import DeadlineOption, infer_deadline_option, resolve_deadline
from lib.pricing import (
    CostBreakdown,
    Platform,
    RateTable,
    aggregate_costs,
    calculate_cost,
    calculate_task_cost,
    convert_to_lkr,
)
from lib.payhere import (
    HashInputError,
    format_amount,
    generate_hash,
    verify_notification_hash,
)
from lib.utils import normalize_uuid, split_full_name

__all__ = [
    # Views
    "ViewCountParseError",
    "format_view_count",
    "parse_view_count",
    # Deadlines
    "DeadlineOption",
    "infer_deadline_option",
    "resolve_deadline",
    # Pricing
    "CostBreakdown",
    "Platform",
    "RateTable",
    "aggregate_costs",
    "calculate_cost",
    "calculate_task_cost",
    "convert_to_lkr",
    # PayHere
    "HashInputError",
    "format_amount",
    "generate_hash",
    "verify_notification_hash",
    # Utils
    "normalize_uuid",
    "split_full_name",
]
