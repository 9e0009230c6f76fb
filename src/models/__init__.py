from sqlmodel import SQLModel
from .tier_config import TierConfig
from .membership_history import MembershipHistory
from .rewards import Reward
