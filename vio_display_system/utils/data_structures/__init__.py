from .overflow_queue import OverflowQueue

__all__ = ["OverflowQueue"]
