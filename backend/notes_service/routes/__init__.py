# Routes package init
"""
Notes Service — API Routes Package

Route Inventory:
    - notes.py:   GET/POST         /api/notes
                  GET/PATCH/DELETE /api/notes/{id}    (bearer token required)
    - health.py:  GET              /health             (open)

Routes stay thin: parse the request, call the service, return the model.
"""
