# Routes package init
"""
ComicShelf Backend — API Routes Package
=========================================

Route Inventory:
    - strips.py:  GET /api/years             (years with strips)
                  GET /api/strips/{year}     (strips of one year)
    - comics.py:  GET /comics/{year}/{file}  (stream one strip image)
    - health.py:  GET /health                (service health check)
    - deps.py:    FastAPI dependencies shared by the routes

Design Principle:
    Routes are THIN. They fetch the StripIndex via dependency injection,
    call one of its read accessors and shape the HTTP response. Not-found and
    stream failures are raised as exceptions and mapped by the handlers
    registered in main.py.
"""
