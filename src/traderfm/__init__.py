"""TraderFM Stage: anonymous Q&A API."""

__version__ = "0.1.0"
