"""
Lírio Farm Ledger - Source Package

Data layer for a small farm: livestock pens, feed stock, animal
transactions, egg and vegetable production.

DESIGN PRINCIPLES:
1. One local store, whole collections read and written at once
2. Repositories never validate, flows always do
3. Not found is a return value, not an exception
4. Every farm operation is logged
5. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Lírio Farm Team"
