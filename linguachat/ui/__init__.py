"""NiceGUI interface - thin presentation layer over the conversation controller.

Responsibilities:
    - Render messages, staged attachment, busy and listening indicators
    - Forward typing, clicks, uploads and drag events as controller calls
    - Report pointer-down targets for outside-click menu dismissal

Holds no conversation state of its own. Everything shown is read from
ControllerState snapshots.
"""
