"""UDP weather query service: wire protocol, server and client."""

__version__ = "0.1.0"
__all__ = ["client", "protocol", "server"]