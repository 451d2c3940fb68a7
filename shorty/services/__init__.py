"""
Service layer for links, visits and redirects.

Services own the database session work and raise ShortyError subclasses;
the API layer turns those into HTTP responses.
"""
