from .audit import Audit
from .base import Base

__all__ = ["Audit", "Base"]
