"""HTTP façade over Google Drive, confined to a configured default folder."""

__version__ = "1.0.0"
