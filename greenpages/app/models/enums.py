"""
User roles enumeration.

Defines the role types for the Green Pages platform.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        ADMIN: Platform staff; accountants receiving agent settlements are admins
        AGENT: Field collector gathering cash from businesses
        USER: Public directory user (default role)
    """
    ADMIN = "ADMIN"
    AGENT = "AGENT"
    USER = "USER"
