# Services package init
"""
Wine Catalog Backend — Services Layer
=======================================

What:  Business logic between routes (HTTP) and the database.
How:   Stateless singletons; every call receives the request's AsyncSession.

Service Inventory:
    - FileService:    label picture validation, storage and cleanup on disk
    - PictureService: picture records, linking to wines
    - WineService:    wines, ratings, add-or-update
    - LookupService:  the six dropdown lists
    - AuthService:    registration and password checks
"""
