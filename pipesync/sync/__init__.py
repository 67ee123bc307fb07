"""Sync: reconcile the local pipeline set with the remote store.

This package provides:
- The remote store contract consumed by the reconciler
- Reconciliation: planning and applying create/update/delete actions
- The runner that dispatches a configured run mode
"""
