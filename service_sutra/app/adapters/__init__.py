from .yantra_client import YantraClient, USER_AGENT

__all__ = ["YantraClient", "USER_AGENT"]
