"""Product API.

A FastAPI service exposing CRUD operations over product records stored in a
relational database through SQLModel.
"""

__version__ = "0.1.0"
