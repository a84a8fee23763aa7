"""
Diary Backend — Application Package
=====================================

What: Backend of the personal diary application.

Architecture:

    ┌─────────────────────────────────────┐
    │        Routes (HTTP Layer)          │  ← status codes, JSON bodies
    ├─────────────────────────────────────┤
    │     Services (Business Layer)       │  ← EntryServiceBase seam
    ├─────────────────────────────────────┤
    │  Repositories (Persistence Layer)   │  ← validation gate, SQL
    ├─────────────────────────────────────┤
    │     Database (Store Handle)         │  ← async engine, sessions
    └─────────────────────────────────────┘

    Each layer receives the one below it at construction time
    (see diary.main.create_app).
"""

__version__ = "1.0.0"
