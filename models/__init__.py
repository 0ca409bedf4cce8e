"""Models"""
from .client_state import ClientState

__all__ = [
    'ClientState'
]
