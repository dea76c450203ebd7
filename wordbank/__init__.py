"""
WordBank Backend — Application Package Initializer
==================================================

What: Marks the `wordbank` directory as a Python package.
Who:  Used by uvicorn (`uvicorn wordbank.main:app`) and by pytest.

Architecture Note:
    The backend is a thin layered service in front of a GitHub repository:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← multipart decoding, HTTP codes
    ├─────────────────────────────────────┤
    │     WordService (Orchestrator)      │  ← image commit → merge → JSON commit
    ├─────────────────────────────────────┤
    │      Merge engine (pure functions)  │  ← document[category][key] = entry
    ├─────────────────────────────────────┤
    │   RemoteFileStore (GitHub contents) │  ← conditional writes by SHA
    └─────────────────────────────────────┘

    The GitHub repository is the only persistence layer. Concurrent writers
    are serialized by the contents API rejecting stale SHAs.
"""

__version__ = "1.0.0"
