"""API module for artcache.

Hey future me - dieses Modul exportiert die HTTP-Seite des Art-Caches!

Struktur:
- routers/: Endpunkte (derzeit nur image.php)
- dependencies.py: Dependency Injection (Session, Repository, ArtService)
- exception_handlers.py: Globale Error-Handler
"""

from artcache.api.routers import api_router

__all__ = ["api_router"]
