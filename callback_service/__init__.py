"""OAuth2 authorization-code callback service that relays tokens to storage."""

__version__ = "0.1.0"
