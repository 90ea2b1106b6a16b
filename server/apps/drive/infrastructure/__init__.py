"""Infrastructure layer for drive app.

This package contains integrations with external systems:
- boto3 S3 clients and paginated listing
- Drive path parsing and validation
- File type classification and display formatting

Keep infrastructure concerns separate from business logic.
"""
