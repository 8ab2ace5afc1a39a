"""Client library for a gofer chat server: API client, popups and the home screen model."""

__version__ = "0.1.0"