"""
Document API modules.

Modules:
- document_upload: Book upload
- document_management: Listing, detail, update and delete
- document_download: PDF and cover streaming
- common: Shared utilities and dependencies
"""

__all__ = []
