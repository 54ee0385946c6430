# Routes package init
"""
Notebook Backend — Routes Package
==================================

Route Inventory:
    - auth.py:      GET/POST /login, POST /logout
    - profile.py:   GET/POST /settings/profile          (edit profile)
    - notes.py:     GET/POST /users/{username}/notes/new (new note)
                    GET      /users/{username}/notes
                    GET/POST /users/{username}/notes/{note_id}
                    GET/POST /users/{username}/notes/{note_id}/edit
    - users.py:     GET /users/{username}, GET /resources/user-images/{id}
    - health.py:    GET /health

Every page is a loader (GET → JSON data) plus, where it has a form, an
action (POST form → 302 redirect, or a submission with field errors).
Routes stay thin: read the request, call a service, shape the response.
"""
