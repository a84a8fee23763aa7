# Services package init
"""
Diary Backend — Services Layer
================================

What:  Business layer between routes (HTTP) and repositories (persistence).

Service Inventory:
    - EntryServiceBase (abstract): contract the routes depend on
    - EntryService: delegates every call to EntryRepository
"""
