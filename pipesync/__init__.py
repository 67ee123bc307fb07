"""pipesync: reconcile local pipeline documents with a fleet-management service."""

__version__ = "0.1.0"
