"""gplay - Google Play publishing from the command line."""

__version__ = "1.0.1"
