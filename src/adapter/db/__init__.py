from .immutability import register_immutability_listeners, unregister_immutability_listeners

__all__ = [
    "register_immutability_listeners",
    "unregister_immutability_listeners",
]
