"""catalog/ -- Product catalog schema and persistence for the Vinyl Store.

Layer rule: catalog/ imports only core/, stdlib, and third-party libraries.
It does NOT import from api/ or auth/.
"""
