"""
Services module for business logic separation.

Leaf first: code_generator, link_registry, uniqueness, click_tracker,
redirect_service, url_service. None of them import FastAPI; the API layer
wires them together per request.
"""
