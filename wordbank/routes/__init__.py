"""
WordBank Backend — API Routes Package
=======================================

Route Inventory:
    - words.py:   POST /api/create-word   (create or overwrite a word)
                  POST /api/update-word   (update an existing word)
    - health.py:  GET  /health            (service health check)

Routes stay thin: they decode the multipart form and call WordService.
"""
