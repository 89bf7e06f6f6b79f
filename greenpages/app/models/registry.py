"""
Import every model so they are registered with Base before create_all.
"""

from greenpages.app.models.user import User
from greenpages.app.models.agent import Agent
from greenpages.app.models.business import Business, BusinessTranslation
from greenpages.app.models.agent_debt import AgentDebt
from greenpages.app.models.settlement import Settlement

__all__ = ["User", "Agent", "Business", "BusinessTranslation", "AgentDebt", "Settlement"]
