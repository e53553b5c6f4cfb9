"""Database Declarative Base — shared metadata for every ORM model.

Invariants:
    - All models inherit from Base (db/base.py)
"""
