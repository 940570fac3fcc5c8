"""
Integration Tests - End-to-End Export Tests.

These tests run the ExportCoordinator over the in-memory store, form
repository and sinks, covering the full request-to-end-of-stream workflow.
"""
