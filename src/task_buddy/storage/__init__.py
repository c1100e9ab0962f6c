"""
Persistence backends.

Components:
- kv_store.py: SQLite-backed key/value store of JSON documents
"""
