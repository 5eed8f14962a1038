"""casync - reconcile conditional access policy definitions with Microsoft Graph."""

__version__ = "0.1.0"
