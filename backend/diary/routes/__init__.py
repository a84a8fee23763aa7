# Routes package init
"""
Diary Backend — API Routes Package
====================================

Route Inventory:
    - entries.py: /api/entries CRUD and /api/entries/search
    - health.py:  GET /health

Routes are thin: parse the request, call the service, map absent results
and Err values to exceptions. Status codes are decided by the handlers in
diary.main.
"""
