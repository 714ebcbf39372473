"""Test package for LinguaChat.

Provides test coverage for the conversation controller and its
collaborators with unit tests for isolated logic and integration tests
for whole user flows.

Structure:
    - unit/: Individual function and class tests
    - integration/: End-to-end controller workflows

Speech providers and responders are replaced by scripted fakes from
conftest.py; no microphone, model or network access is needed.
Leverages pytest with pytest-check for soft assertions.
"""
