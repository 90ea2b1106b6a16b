"""Business logic layer for drive app.

This package contains all business logic for drive operations:
- Drive and directory listing with filtering, sorting and pagination
- Object upload, download, rename, delete and text editing
- Size aggregation and directory archives

Views only parse requests and render results, everything that talks
to the object store goes through here.
"""
