# Services package init
"""
Conduit Backend — Services Layer
==================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
How:   Services accept the request's AsyncSession plus validated request
       schemas, apply the domain rules, and return response schemas.
       Each service is a stateless module-level singleton.

Service Inventory:
    - UserService:    register, login, current user, update
    - ProfileService: profiles and the follow graph
    - ArticleService: list, feed, CRUD, favorites
    - CommentService: list, add, delete comments of an article
    - TagService:     tag normalization, get-or-create, tag list

Services flush but never commit; the session dependency commits once per
request (see conduit.database).
"""
