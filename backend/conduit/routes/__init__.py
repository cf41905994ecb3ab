# Routes package init
"""
Conduit Backend — API Routes Package
======================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles one resource. All routers except health
       are mounted under settings.api_prefix (default /api) in main.py.

Route Inventory:
    - users.py:     POST /users/register (alias POST /users), POST /users/login,
                    GET /user, PUT /user
    - profiles.py:  GET /profiles/{username}, POST|DELETE /profiles/{username}/follow
    - articles.py:  GET|POST /articles, GET /articles/feed,
                    GET|PUT|DELETE /articles/{slug},
                    POST|DELETE /articles/{slug}/favorite
    - comments.py:  GET|POST /articles/{slug}/comments,
                    DELETE /articles/{slug}/comments/{id}
    - tags.py:      GET /tags
    - health.py:    GET /health (no prefix)

Design Principle:
    Routes are THIN: resolve the caller and the session through dependencies,
    let the request schema validate the body, call one service method.
"""
