"""DevCamper API: authentication and credential lifecycle."""

__version__ = "1.0.0"
