"""
Diary Backend — Repositories Package
======================================

What:  Persistence layer. EntryRepository is the sole owner of the
       `entries` table and the only code that issues SQL against it.
"""
