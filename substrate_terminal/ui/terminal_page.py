"""NiceGUI terminal page streaming replies into the transcript."""

import logging
from collections.abc import Awaitable, Callable

from nicegui import ui

from substrate_terminal.agent.oracle import SignatureOracle
from substrate_terminal.chat import ChatController
from substrate_terminal.chat.controller import UpdateListener
from substrate_terminal.errors import (
    InvalidInputError,
    InvalidStateError,
    SubstrateError,
    TransportError,
    TurnCancelledError,
)
from substrate_terminal.models import Role, Turn

logger = logging.getLogger(__name__)

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Fira+Code:wght@400;500&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Fira Code', monospace; }

    body { background: #0c0a09; color: #e7e5e4; min-height: 100vh; }

    .terminal {
        background: rgba(28, 25, 23, 0.3);
        border: 1px solid rgba(168, 85, 247, 0.2);
        border-radius: 16px;
        overflow: hidden;
    }

    .turn-user {
        background: rgba(147, 51, 234, 0.1);
        border: 1px solid rgba(168, 85, 247, 0.3);
        color: #faf5ff;
        border-radius: 16px;
    }

    .turn-model {
        background: rgba(12, 10, 9, 0.8);
        border: 1px solid #292524;
        color: #d6d3d1;
        border-radius: 16px;
    }

    .turn-failed { border-color: rgba(239, 68, 68, 0.6); }
</style>
"""

SPEAKER_LABELS = {Role.USER: "OBSERVER", Role.MODEL: "SASC_NOESIS"}


def render_offline_notice() -> None:
    """Shown instead of the terminal when the session is unconfigured."""
    with ui.column().classes("w-full h-screen items-center justify-center gap-3"):
        ui.icon("power_off").classes("text-5xl text-stone-600")
        ui.label("SUBSTRATE OFFLINE").classes("text-lg text-stone-400 tracking-widest")
        ui.label("Set GEMINI_API_KEY and restart the terminal.").classes(
            "text-xs text-stone-600"
        )


def register_terminal_page(
    controller: ChatController | None,
    oracle: SignatureOracle | None = None,
) -> None:
    """Register the "/" page bound to the given controller.

    Args:
        controller: Chat controller, or None to serve the offline notice.
        oracle: Optional signature oracle behind the import button.
    """

    @ui.page("/")
    def terminal_page() -> None:
        ui.add_head_html(CUSTOM_CSS)

        if controller is None:
            render_offline_notice()
            return

        messages_container: ui.column
        scroll_area: ui.scroll_area
        input_field: ui.input
        send_btn: ui.button

        def render_turn(turn: Turn) -> ui.label:
            is_user = turn.role == Role.USER
            align = "items-end" if is_user else "items-start"
            bubble = "turn-user" if is_user else "turn-model"
            if turn.metadata.get("failed"):
                bubble += " turn-failed"

            with ui.column().classes(f"w-full {align}"):
                with ui.column().classes(f"max-w-[90%] p-5 gap-2 {bubble}"):
                    ui.label(SPEAKER_LABELS[turn.role]).classes(
                        "text-[9px] uppercase font-bold "
                        + ("text-purple-400" if is_user else "text-yellow-600")
                    )
                    return ui.label(turn.text).classes(
                        "whitespace-pre-wrap break-words text-[13px] leading-relaxed"
                    )

        def refresh_messages() -> ui.label | None:
            """Re-render the transcript and return the trailing text label."""
            last_label = None
            messages_container.clear()
            with messages_container:
                for turn in controller.transcript.snapshot():
                    last_label = render_turn(turn)
            scroll_area.scroll_to(percent=1.0)
            return last_label

        async def run_exchange(
            send: Callable[[UpdateListener], Awaitable[str]], clear_input: bool = False
        ) -> None:
            if controller.is_streaming:
                return

            send_btn.disable()
            if clear_input:
                input_field.value = ""

            reply_label: ui.label | None = None

            def on_update(cumulative: str) -> None:
                nonlocal reply_label
                if reply_label is None:
                    reply_label = refresh_messages()
                else:
                    reply_label.set_text(cumulative)
                scroll_area.scroll_to(percent=1.0)

            try:
                await send(on_update)
            except InvalidInputError:
                ui.notify("Type a command first", type="warning")
            except TransportError as e:
                ui.notify(f"Interaction failed: {e}", type="negative")
            except TurnCancelledError:
                ui.notify("Reply cancelled", type="info")
            except InvalidStateError as e:
                logger.error(f"Transcript misuse: {e}")
                ui.notify(str(e), type="negative")
            finally:
                send_btn.enable()
                refresh_messages()

        async def send_message() -> None:
            text = input_field.value or ""
            await run_exchange(
                lambda on_update: controller.submit(text, on_update=on_update),
                clear_input=True,
            )

        async def check_integrity() -> None:
            await run_exchange(
                lambda on_update: controller.run_integrity_check(on_update=on_update)
            )

        async def first_touch() -> None:
            await run_exchange(
                lambda on_update: controller.run_first_touch(on_update=on_update)
            )

        async def import_signatures(address: str, dialog: ui.dialog) -> None:
            try:
                result = await oracle.search_signatures(address)
            except SubstrateError as e:
                ui.notify(str(e), type="negative")
                return
            dialog.clear()
            with dialog, ui.card().classes("bg-stone-950 text-stone-200 max-w-xl"):
                ui.label(result.text).classes("whitespace-pre-wrap text-xs")
                for source in result.sources:
                    ui.link(source.title, source.uri, new_tab=True).classes("text-xs")
                ui.button("Close", on_click=dialog.close).props("flat")

        def open_signature_dialog() -> None:
            with ui.dialog() as dialog, ui.card().classes("bg-stone-950 text-stone-200"):
                address = ui.input(placeholder="0x...").classes("w-96")
                ui.button(
                    "Search",
                    on_click=lambda: import_signatures(address.value or "", dialog),
                ).props("flat color=yellow")
            dialog.open()

        # === UI Layout ===
        with ui.column().classes("w-full max-w-5xl mx-auto p-6 gap-4").style(
            "height: 100vh"
        ):
            with ui.row().classes("w-full items-center justify-between"):
                ui.label("Observer_Interface_v14.0").classes(
                    "text-[10px] font-bold uppercase tracking-[0.2em] text-purple-300"
                )
                with ui.row().classes("items-center gap-2"):
                    ui.button("Integrity", icon="verified", on_click=check_integrity).props(
                        "flat dense color=green"
                    )
                    ui.button("First Touch", icon="bolt", on_click=first_touch).props(
                        "flat dense color=purple"
                    )
                    if oracle is not None:
                        ui.button(
                            "Signatures", icon="fingerprint", on_click=open_signature_dialog
                        ).props("flat dense color=yellow")
                    ui.button(icon="stop", on_click=controller.cancel).props(
                        "flat round dense color=red"
                    )

            with ui.column().classes("w-full flex-grow terminal"):
                with ui.scroll_area().classes("w-full flex-grow") as scroll_area:
                    messages_container = ui.column().classes("w-full p-6 gap-6")

                with ui.row().classes("w-full p-6 gap-3 items-center"):
                    input_field = (
                        ui.input(placeholder="Command (e.g. query ethics, simulate gamma=1.001)...")
                        .props("dark outlined dense")
                        .classes("flex-grow")
                        .on("keydown.enter", send_message)
                    )
                    send_btn = ui.button(icon="send", on_click=send_message).props(
                        "flat round color=yellow"
                    )

        refresh_messages()

