"""Unit tests for individual components in isolation.

Ensures fast execution with minimal dependencies.

Coverage:
    - models/: Pydantic validation and the language catalog
    - conversation/: stores, staging, speech session, dispatcher, overlays
    - agent/: Responder configuration, selection and replies
    - parsing/: Attachment text extraction
    - speech/: Whisper backend detection and worker callbacks

Uses mocks for external services (agno, httpx transport, audio packages).
Leverages pytest-check for multiple assertions per test.
"""
