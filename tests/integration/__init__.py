"""Integration tests for components working together as a system.

No mocks for core functionality - tests real interactions.

Coverage:
    - Typed and attachment submissions with the demo responder
    - Drag-and-drop staging
    - Dictation into the input box and late speech events
    - Language menus and outside-click dismissal

The speech provider is scripted; no microphone or network is required.
"""
