"""URL shortener service: short codes that redirect to long URLs, with expiry bookkeeping."""

__version__ = "0.1.0"
