"""LinguaChat - multilingual chat client with typed, spoken and file input.

Combines a race-free conversation controller with NiceGUI for visualization,
Agno for model orchestration, faster-whisper for optional local dictation,
and Pydantic for data validation.

Components:
    - conversation: controller state machine (staging, speech, dispatch, overlays)
    - agent: responder collaborators producing reply turns
    - speech: speech-to-text providers
    - parsing: attachment text extraction
    - ui: Web interface observing the controller
    - models: shared data models and the language catalog
"""

__version__ = "0.1.0"
