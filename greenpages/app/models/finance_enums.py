"""
Finance enumerations.
"""

import enum


class CollectionType(str, enum.Enum):
    """What the cash collected by an agent was paid for."""
    SUBSCRIPTION = "SUBSCRIPTION"  # Listing plan subscription
    AD_PAYMENT = "AD_PAYMENT"  # Paid advertisement


class LedgerEntryKind(str, enum.Enum):
    """Ledger row kind."""
    DEBT = "DEBT"  # Cash collected, balance increases
    SETTLEMENT = "SETTLEMENT"  # Cash handed to an accountant, balance decreases
