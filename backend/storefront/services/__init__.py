# Services package init
"""
Storefront Backend: Services Layer
====================================

What:  Business logic sitting between routes (HTTP) and repositories (persistence).
How:   Services receive their repositories through the constructor and return
       response schemas. They are built once by `create_app()` and injected
       into routes via FastAPI's dependency system (see deps.py).

Service Inventory:
    - StoreService:   create, fetch and update stores
    - ProductService: product CRUD and the paginated listings with store join
"""
