"""Console access: account-to-menu permission matrix service for the admin console."""

__version__ = "1.0.0"
