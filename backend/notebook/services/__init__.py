# Services package init
"""
Notebook Backend — Services Layer
==================================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Services receive the request's AsyncSession plus plain data, return
       pydantic models or ActionResults, and raise app exceptions.

Service Inventory:
    - AuthService:    password hashing, login sessions, require_user_id
    - UserService:    profile loader data, public profiles, user images
    - ProfileService: the edit-profile action (validation + uniqueness checks)
    - NoteService:    the shared note editor action and note loaders
"""
