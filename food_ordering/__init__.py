"""
                Food Ordering API

Backend for a food-ordering aggregator: restaurant listing, per-restaurant
menus, search and order placement/retrieval.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
