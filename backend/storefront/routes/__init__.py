# Routes package init
"""
Storefront Backend: API Routes Package
========================================

Route Inventory:
    - stores.py:   POST /store, GET /store/{id}, PUT /store/{id},
                   GET /store/{id}/products
    - products.py: GET /product, POST /product, GET /product/{slug},
                   GET /product/id/{id}, PUT /product/{id}, DELETE /product/{id}
    - health.py:   GET /health

Routes are thin: run the request validator, call one service method, wrap
the result with `success_response()`. Errors are raised, never built by hand;
the handlers in main.py turn them into envelopes.
"""
