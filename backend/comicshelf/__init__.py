"""
ComicShelf Backend — Application Package Initializer
=====================================================

What: Marks the `comicshelf` directory as a Python package.
Why:  Enables module imports like `from comicshelf.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    This backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Classifier, Index)      │  ← Validation, lookup structures
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← Domain records + Pydantic
    ├─────────────────────────────────────┤
    │     Archive Sources (Storage)       │  ← zip / 7z readers
    └─────────────────────────────────────┘

    The index is built once at startup and never mutated afterwards, so
    every layer above the archive sources is read-only at request time.
"""

__version__ = "1.0.0"
