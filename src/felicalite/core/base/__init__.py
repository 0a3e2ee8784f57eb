from felicalite.core.base.message import Message, Result
from felicalite.core.base.terminal import Terminal, handles

__all__ = ["Message", "Result", "Terminal", "handles"]
