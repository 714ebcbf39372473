"""NiceGUI chat interface driven by the conversation controller."""

import base64
import logging

from nicegui import Client, events, ui

from linguachat.agent import create_responder, get_agent_config
from linguachat.conversation import ConversationController, Overlay, get_controller_config
from linguachat.conversation.blobs import BlobStore
from linguachat.conversation.config import ControllerConfig
from linguachat.errors import AttachmentError
from linguachat.models import LANGUAGES, ControllerState, IncomingFile, Message, Sender
from linguachat.speech import SpeechProvider, UnavailableSpeechProvider, WhisperConfig, WhisperSpeechProvider
from linguachat.speech.whisper import speech_backend_installed

logger = logging.getLogger(__name__)

# Reports the anchored regions around a pointer-down target, innermost first.
POINTER_PATH_JS = (
    "(e) => emit(e.composedPath()"
    ".map((node) => node.dataset && node.dataset.anchor)"
    ".filter(Boolean))"
)

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #111827; min-height: 100vh; }

    .header { background: rgba(31, 41, 55, 0.5); border-bottom: 1px solid #374151; }

    .message-user { background: #2563eb; color: white; border-radius: 12px; }
    .message-bot { background: #1f2937; color: #f3f4f6; border-radius: 12px; }

    .avatar-user { background: #3b82f6; }
    .avatar-bot { background: #374151; }

    .drag-active { background: rgba(59, 130, 246, 0.1); }

    .drop-overlay {
        position: fixed; inset: 0; z-index: 50; pointer-events: none;
        background: rgba(17, 24, 39, 0.5); backdrop-filter: blur(4px);
    }

    .input-box { background: #1f2937; border-radius: 8px; }
</style>
"""


def build_speech_provider(config: ControllerConfig) -> SpeechProvider:
    """Local whisper dictation when its packages are installed."""
    if not speech_backend_installed():
        return UnavailableSpeechProvider()
    return WhisperSpeechProvider(
        WhisperConfig(model_name=config.whisper_model, silence_timeout=config.silence_timeout)
    )


def create_controller() -> ConversationController:
    """Build a controller for one browser session."""
    agent_config = get_agent_config()
    controller_config = get_controller_config()
    blobs = BlobStore()
    return ConversationController(
        create_responder(agent_config, blobs),
        speech_provider=build_speech_provider(controller_config),
        config=controller_config,
        responder_timeout=agent_config.timeout,
        blobs=blobs,
    )


def close_with_client(client: Client, controller: ConversationController) -> None:
    """End the session when NiceGUI deletes the client.

    A dropped websocket only disconnects the client; it may reconnect within
    the reconnect timeout and must find its conversation intact.
    """
    client.on_delete(controller.close)


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    controller = create_controller()
    close_with_client(ui.context.client, controller)

    messages_container: ui.column
    preview_row: ui.row
    input_field: ui.input
    mic_btn: ui.button
    send_btn: ui.button
    drop_overlay: ui.element
    chat_area: ui.scroll_area

    def render_avatar(is_user: bool) -> None:
        css = "avatar-user" if is_user else "avatar-bot"
        icon = "person" if is_user else "smart_toy"
        with ui.element("div").classes(f"w-8 h-8 rounded-full flex items-center justify-center {css}"):
            ui.icon(icon).classes("text-white text-lg")

    def render_attachment(msg: Message) -> None:
        attachment = msg.attachment
        if attachment is None:
            return
        with ui.element("div").classes("mt-2 p-2 bg-black/20 rounded-lg"):
            if attachment.is_image:
                try:
                    data = controller.blobs.resolve(attachment.content_ref)
                except AttachmentError:
                    ui.label(attachment.name).classes("text-xs")
                    return
                encoded = base64.b64encode(data).decode("ascii")
                ui.image(f"data:{attachment.mime_type};base64,{encoded}").classes("max-h-60 rounded-lg")
            else:
                with ui.row().classes("items-center gap-2"):
                    ui.icon("description").classes("text-sm")
                    ui.label(attachment.name).classes("text-xs truncate")

    def render_message(msg: Message) -> None:
        is_user = msg.sender == Sender.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-bot"
        with ui.row().classes(f"w-full {align} gap-2 items-start"):
            if not is_user:
                render_avatar(False)
            with ui.element("div").classes(f"px-4 py-2 max-w-[80%] break-words {bubble}"):
                ui.label(msg.text).classes("text-sm")
                render_attachment(msg)
            if is_user:
                render_avatar(True)

    def refresh(state: ControllerState) -> None:
        messages_container.clear()
        with messages_container:
            for msg in state.messages:
                render_message(msg)
            if state.busy:
                with ui.row().classes("w-full justify-start gap-2 items-center"):
                    render_avatar(False)
                    ui.spinner(size="sm").classes("text-gray-400")

        preview_row.clear()
        preview_row.set_visibility(state.staged_attachment is not None)
        if state.staged_attachment is not None:
            with preview_row:
                ui.icon("image" if state.staged_attachment.is_image else "description")
                ui.label(state.staged_attachment.name).classes("text-sm text-gray-300 flex-grow truncate")
                ui.button(icon="close", on_click=controller.remove_attachment).props("flat round dense")

        if input_field.value != state.staged_text:
            input_field.value = state.staged_text
        input_field.props(f'placeholder="Type your message in {state.selected_language.display_name}..."')
        mic_btn.props(f"icon={'mic_off' if state.listening else 'mic'}")
        mic_btn.set_visibility(state.speech_available)
        send_btn.set_enabled(state.can_submit)
        drop_overlay.set_visibility(state.dragging)
        if state.dragging:
            chat_area.classes(add="drag-active")
        else:
            chat_area.classes(remove="drag-active")
        menus[Overlay.HEADER_LANGUAGE].set_visibility(state.header_language_open)
        menus[Overlay.INPUT_LANGUAGE].set_visibility(state.input_language_open)
        for label in language_labels:
            label.set_text(state.selected_language.display_name)

    def on_text_change(e: events.ValueChangeEventArguments) -> None:
        if e.value != controller.staging.text:
            controller.set_text(e.value or "")

    async def on_upload(e: events.UploadEventArguments) -> None:
        data = await e.file.read()
        logger.info(f"Received upload {e.file.name} ({len(data)} bytes)")
        controller.select_file(
            [IncomingFile(name=e.file.name, mime_type=e.file.content_type or "", data=data)]
        )
        uploader.reset()

    def language_menu(overlay: Overlay) -> ui.column:
        with ui.column().classes("absolute z-50 w-48 bg-gray-800 rounded-lg shadow-lg py-1 gap-0") as menu:
            for language in LANGUAGES:
                ui.button(
                    language.display_name,
                    on_click=lambda _, lang=language: controller.choose_language(overlay, lang),
                ).props("flat align=left no-caps").classes("w-full text-gray-300")
        return menu

    menus: dict[Overlay, ui.column] = {}
    language_labels: list[ui.label] = []

    # === UI Layout ===
    page_root = ui.column().classes("w-full h-screen gap-0")
    page_root.on("mousedown", lambda e: controller.pointer_down(e.args or []), js_handler=POINTER_PATH_JS)
    with page_root:
        # Header
        with ui.row().classes("w-full header px-4 py-3 items-center justify-between"):
            with ui.row().classes("items-center gap-2"):
                ui.icon("smart_toy").classes("text-blue-400 text-2xl")
                ui.label("AI Assistant").classes("text-lg font-semibold text-white")
            with ui.element("div").classes("relative").props(f"data-anchor={Overlay.HEADER_LANGUAGE.value}"):
                with ui.button(on_click=lambda: controller.toggle_overlay(Overlay.HEADER_LANGUAGE)).props("flat no-caps"):
                    ui.icon("language").classes("text-gray-400")
                    language_labels.append(ui.label().classes("text-sm text-gray-300"))
                menus[Overlay.HEADER_LANGUAGE] = language_menu(Overlay.HEADER_LANGUAGE).classes("right-0 mt-2")

        # Messages
        with ui.scroll_area().classes("flex-grow w-full max-w-4xl mx-auto") as chat_area:
            messages_container = ui.column().classes("w-full p-4 gap-4")
        chat_area.on("dragover.prevent", controller.drag_over, throttle=0.2)
        chat_area.on("dragleave", controller.drag_leave)

        # Staged file preview
        preview_row = ui.row().classes("w-full max-w-4xl mx-auto p-2 items-center gap-2 bg-gray-800 rounded-lg")

        # Input
        with ui.row().classes("w-full max-w-4xl mx-auto p-4 gap-2 items-center no-wrap"):
            with ui.element("div").classes("relative").props(f"data-anchor={Overlay.INPUT_LANGUAGE.value}"):
                with ui.button(on_click=lambda: controller.toggle_overlay(Overlay.INPUT_LANGUAGE)).props("flat no-caps"):
                    ui.icon("language").classes("text-gray-400")
                    language_labels.append(ui.label().classes("text-sm text-gray-300 gt-xs"))
                    ui.icon("expand_more").classes("text-gray-400")
                menus[Overlay.INPUT_LANGUAGE] = language_menu(Overlay.INPUT_LANGUAGE).classes("bottom-full mb-1 left-0")
            with ui.element("div").classes("flex-grow input-box px-3"):
                input_field = (
                    ui.input(on_change=on_text_change)
                    .props("borderless dense dark")
                    .classes("w-full")
                    .on("keydown.enter.prevent", controller.submit)
                )
            mic_btn = ui.button(icon="mic", on_click=controller.toggle_listening).props("flat round")
            uploader = ui.upload(on_upload=on_upload, auto_upload=True, max_files=1).props("hidden")
            ui.button(icon="attach_file", on_click=lambda: uploader.run_method("pickFiles")).props("flat round")
            send_btn = ui.button(icon="send", on_click=controller.submit).props("round unelevated color=primary")

        drop_js = (
            "(e) => { e.preventDefault(); const files = e.dataTransfer ? e.dataTransfer.files : [];"
            f" if (files.length) getElement({uploader.id}).$refs.qRef.addFiles([files[0]]);"
            " emit(); }"
        )
        chat_area.on("drop", lambda: controller.drop([]), js_handler=drop_js)

        # Drag & drop overlay
        with ui.element("div").classes("drop-overlay flex items-center justify-center") as drop_overlay:
            with ui.column().classes("items-center p-8 rounded-lg border-2 border-dashed border-blue-500"):
                ui.icon("upload_file").classes("text-blue-400 text-5xl")
                ui.label("Drop your file here").classes("text-blue-400 text-lg font-medium")

    controller.subscribe(refresh)
    refresh(controller.state)

