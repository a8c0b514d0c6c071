"""State management utilities for the Heavytime UI.

This module handles the lazy initialization of the per-session services:
the story store, the image lister and the story workflow.
"""

import logging
from datetime import date

from heavytime.core.config import config
from heavytime.core.image_lister import ImageLister
from heavytime.core.story_db import StoryDB
from heavytime.workflows.story import build_story_workflow

from .models import UIState

logger = logging.getLogger(__name__)


def initialize_ui_state(state: UIState | None = None) -> UIState:
    """Initialize or ensure UI state is ready.

    Components that are already set (for example by tests) are kept.

    Args:
        state: Existing UIState or None

    Returns:
        Initialized UIState instance
    """
    if state is None:
        logger.info("Creating new UIState")
        state = UIState()

    if state.current_date is None:
        state.current_date = date.today()

    if state.is_initialized():
        logger.debug("UIState already initialized")
        return state

    logger.info("Initializing UIState components...")

    try:
        if state.store is None:
            logger.info(f"Opening story store at {config.database_path}")
            state.store = StoryDB(config.database_path)

        if state.image_lister is None:
            state.image_lister = ImageLister(config)

        if state.workflow is None:
            state.workflow = build_story_workflow(config, store=state.store)

        logger.info(f"UIState initialization complete: {state}")
        return state

    except Exception as e:
        logger.error(f"Error initializing UIState: {e}", exc_info=True)
        raise
