"""
Memory Grid - a shared archive of short knowledge, experience, lesson and mistake entries.

Package structure:
- core: Configuration, logging, error types
- auth: Session providers (managed auth service, local accounts)
- memory: Memory entity, row stores, repository, export
- cli: Command line view layer
"""

__version__ = "0.1.0"
