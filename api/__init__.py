"""api/ -- HTTP layer for the Vinyl Store.

Layer rule: api/ may import from auth/, catalog/, and core/. Nothing imports
from api/.
"""
