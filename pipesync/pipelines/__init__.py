"""Pipelines: local documents and the records synced to the fleet service.

This package provides:
- Metadata: parsing and writing the ``// matchers:`` directive
- Loading: turning a directory of ``.alloy``/``.river`` files into records
- Backup: writing a remote collection back out as documents
"""
