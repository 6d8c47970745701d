"""
Memory module - the Memory entity and its data-access layer.

Layers:
- base: Memory entity, draft, row store interface
- mapping: row <-> entity conversion at the store boundary
- store / rest: row stores (local SQLite, managed PostgREST)
- repository: visibility and ownership rules over a row store
- export: JSON export document and sinks
"""
