"""
API Package - Request Plumbing.

    - export_form: Maps raw request inputs onto an ExportRequest and maps
      the outcome onto a transport-neutral ExportResponse
"""

from record_exporter.api.export_api import ExportResponse, export_form

__all__ = ["ExportResponse", "export_form"]
