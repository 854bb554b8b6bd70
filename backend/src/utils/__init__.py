"""
Utility modules for the expediente application.

This package contains shared helpers used across the application:
datetime handling and object storage for image attachments.
"""
