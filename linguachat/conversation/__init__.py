"""Conversation interaction controller.

Reconciles independent asynchronous input sources into one ordered,
race-free conversation.

Components:
    - MessageStore: ordered log with monotonic ids
    - InputStagingArea: staged text, one attachment, selected language
    - BlobStore: content behind attachment references
    - SpeechSession: dictation into the staged text
    - ResponseDispatcher: busy-gated submit/reply round trips
    - OverlayRouter: language menus, outside-click dismissal, drag flag
    - ConversationController: the aggregate the UI talks to
"""

from linguachat.conversation.blobs import BlobStore
from linguachat.conversation.config import ControllerConfig, get_controller_config
from linguachat.conversation.controller import ConversationController
from linguachat.conversation.dispatcher import Responder, ResponseDispatcher
from linguachat.conversation.message_store import MessageStore
from linguachat.conversation.overlays import Overlay, OverlayRouter, PointerEventBus
from linguachat.conversation.speech_session import SpeechSession
from linguachat.conversation.staging import InputStagingArea

__all__ = [
    "BlobStore",
    "ControllerConfig",
    "ConversationController",
    "InputStagingArea",
    "MessageStore",
    "Overlay",
    "OverlayRouter",
    "PointerEventBus",
    "Responder",
    "ResponseDispatcher",
    "SpeechSession",
    "get_controller_config",
]
