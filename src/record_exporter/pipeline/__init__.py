"""
Pipeline Package - Export Orchestration.

    - ExportCoordinator: Runs the export state machine from request to
      end-of-stream

The coordinator is responsible for:
    - Rejecting invalid requests before any store access
    - Resolving the form, query, protected fields and encoder
    - Invoking extension hooks at their named stages
    - Pulling, transforming and encoding records one at a time
    - Closing the cursor on completion, failure or cancellation
"""

from record_exporter.pipeline.export_coordinator import ExportCoordinator

__all__ = ["ExportCoordinator"]
