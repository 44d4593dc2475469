from .account import AccountModel
from .complaint import ComplaintModel

__all__ = ["AccountModel", "ComplaintModel"]
