"""Gradio UI for Heavytime Stories."""

import logging

import gradio as gr

from heavytime.core.config import config

from .handlers import (
    create_story_from_selection,
    go_to_today,
    load_day,
    navigate_day,
    refresh_stories,
    select_day_image,
    select_story,
)
from .models import NO_SELECTION_TEXT, NO_STORY_TEXT, UIState

# Configure logging
logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_ui() -> gr.Blocks:
    """Create the Gradio UI.

    Returns:
        Gradio Blocks app
    """
    app = gr.Blocks(title="Heavytime Stories")

    with app:
        # Session state - one instance per user
        ui_state = gr.State(UIState())

        gr.Markdown(
            """
            # Heavytime Stories
            ### Daily photos turned into poems, narration and comics
            """
        )

        with gr.Tabs():
            with gr.Tab("Today", id="today_tab"):
                today = create_today_tab(ui_state)

            with gr.Tab("Stories", id="stories_tab") as stories_tab:
                stories = create_stories_tab(ui_state)

                stories_tab.select(
                    fn=refresh_stories,
                    inputs=[ui_state],
                    outputs=[stories["story_list"], ui_state],
                )

        app.load(
            fn=load_day,
            inputs=[ui_state],
            outputs=[today["date_heading"], today["gallery"], today["selection_info"], ui_state],
        )

    return app


def _detail_view() -> dict:
    """Story detail components: text, narration, comic and source photo."""
    story_markdown = gr.Markdown(value=NO_STORY_TEXT)
    audio = gr.Audio(label="Narration", type="filepath", interactive=False)
    with gr.Row():
        comic = gr.Image(label="Comic", interactive=False, height=400)
        photo = gr.Image(label="Photo", interactive=False, height=400)
    return {"markdown": story_markdown, "audio": audio, "comic": comic, "photo": photo}


def create_today_tab(ui_state) -> dict:
    """Create the week strip, photo gallery and story dialog.

    Args:
        ui_state: UI state component

    Returns:
        Components needed by app-level events
    """
    with gr.Row():
        prev_btn = gr.Button("◀ Previous day", size="sm")
        today_btn = gr.Button("Today", size="sm")
        next_btn = gr.Button("Next day ▶", size="sm")

    date_heading = gr.Markdown()

    gallery = gr.Gallery(
        label="Photos",
        height=400,
        columns=4,
        object_fit="cover",
        allow_preview=False,
    )

    with gr.Row():
        with gr.Column(scale=1):
            selected_photo = gr.Image(label="Selected photo", interactive=False, height=250)
        with gr.Column(scale=2):
            selection_info = gr.Markdown(value=NO_SELECTION_TEXT)
            title_input = gr.Textbox(
                label="Title",
                placeholder="Give this story a title...",
                max_lines=1,
            )
            create_btn = gr.Button("Create", variant="primary")
            status = gr.Markdown()

    gr.Markdown("### Story")
    detail = _detail_view()

    day_outputs = [date_heading, gallery, selection_info, ui_state]

    prev_btn.click(fn=lambda s: navigate_day(-1, s), inputs=[ui_state], outputs=day_outputs)
    next_btn.click(fn=lambda s: navigate_day(1, s), inputs=[ui_state], outputs=day_outputs)
    today_btn.click(fn=go_to_today, inputs=[ui_state], outputs=day_outputs)

    # Image selection - uses gr.SelectData for event
    gallery.select(
        fn=select_day_image,
        inputs=[ui_state],
        outputs=[selected_photo, selection_info, ui_state],
    )

    create_btn.click(
        fn=create_story_from_selection,
        inputs=[title_input, ui_state],
        outputs=[
            status,
            detail["markdown"],
            detail["audio"],
            detail["comic"],
            detail["photo"],
            ui_state,
        ],
    )

    return {"date_heading": date_heading, "gallery": gallery, "selection_info": selection_info}


def create_stories_tab(ui_state) -> dict:
    """Create the story list and its detail view.

    Args:
        ui_state: UI state component

    Returns:
        Components needed by app-level events
    """
    with gr.Row():
        story_list = gr.Dropdown(label="Stories (newest first)", choices=[], scale=4)
        refresh_btn = gr.Button("🔄 Refresh", scale=1)

    detail = _detail_view()

    refresh_btn.click(fn=refresh_stories, inputs=[ui_state], outputs=[story_list, ui_state])

    story_list.change(
        fn=select_story,
        inputs=[story_list, ui_state],
        outputs=[detail["markdown"], detail["audio"], detail["comic"], detail["photo"], ui_state],
    )

    return {"story_list": story_list}


def main():
    """Main entry point for the application."""
    logger.info("Starting Heavytime Stories UI...")
    logger.info(f"Story store: {config.database_path}")
    logger.info(
        f"Services configured: object_store={config.storage_configured}, "
        f"poem={config.anthropic_configured}, speech/comic={config.fal_configured}"
    )

    app = create_ui()

    logger.info(f"Launching Gradio UI on {config.gradio_server_name}:{config.gradio_server_port}")

    app.launch(
        server_name=config.gradio_server_name,
        server_port=config.gradio_server_port,
        share=config.gradio_share,
        show_error=True,
        inbrowser=False,
    )


if __name__ == "__main__":
    main()
