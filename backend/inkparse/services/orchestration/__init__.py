"""Service orchestration layer: coordinates the per-request flows.

Modules:
- document_service: image-to-notes and prompt-to-documentation flows.
"""
