# Routes package init
"""
Wine Catalog Backend — API Routes Package
===========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - pictures.py: POST /upload-{front,back}-label/{sessionId}, GET /pictures/{wineId},
                   GET /picture/{pictureId}, GET /images/{filename}
    - wines.py:    GET /wines, POST /add-wine, POST /{aspect}-rating/{wineId},
                   GET/PUT/DELETE /wines/{wineId}
    - lookups.py:  POST/GET for the six dropdown lists
    - auth.py:     /register, /login, /logout, /me, /session
    - health.py:   GET /health

Routes stay thin: extract request data, call a service, return its result.
"""
