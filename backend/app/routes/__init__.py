# Routes package init
"""
Blog Backend — API Routes Package
===================================

Route Inventory:
    - index.py:       GET  /                                        (welcome document)
                      GET  /api                                     (smoke test)
    - articles.py:    GET  /api/articles                            (list)
                      GET  /api/articles/{id}                       (detail)
                      POST /api/articles                            (create)
                      PUT  /api/articles/{id}                       (partial update)
    - categories.py:  GET  /api/categories                          (list, by name)
                      GET  /api/categories/articles-with-categories (joined view)
                      GET  /api/categories/{name:path}/articles     (by category)
                      POST /api/categories                          (create)
    - health.py:      GET  /health                                  (database probe)
    - payload.py:     body binding dependencies shared by POST/PUT handlers

Routes stay thin: bind input, call a service, wrap the result in the
`{status: "success", data, count?}` envelope.
"""
