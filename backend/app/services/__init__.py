# Services package init
"""
Blog Backend — Services Layer
===============================

Service Inventory:
    - ArticleService:  list/get/create/partial-update articles and their
                       category links
    - CategoryService: list/create categories, articles joined with
                       category names

Services are stateless singletons; the request's AsyncSession is passed
into every call.
"""
