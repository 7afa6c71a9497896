"""Declarative machine setup executor.

Core design goals:
- Idempotent entries (guard checks, per-command checks)
- Distribution-aware commands
- Failures accumulate instead of aborting
- Centralized logging
"""

__all__ = []
