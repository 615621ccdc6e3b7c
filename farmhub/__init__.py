"""
Farm hub schedule engine.

Turns a tabular daily farm schedule into the consolidated views shown on the
hub: a merged person-by-slot grid, meal assignments, evening and weekend
task tables and each person's own task list.
"""
import logging

from .config import get_config

__version__ = '1.0.0'


def create_board(current_user=None, user_type=None, config_name=None, **kwargs):
    """
    Board factory function.

    Args:
        current_user: Viewer's name
        user_type: Session user type string
        config_name: Configuration name (development, testing, production)
                    If None, determined from environment
        **kwargs: Passed through to ScheduleBoard (task_meta, known_users)

    Returns:
        ScheduleBoard with no snapshot loaded yet
    """
    from .error_handlers import setup_logging
    from .services.schedule_board import ScheduleBoard

    config_class = get_config(config_name, validate=True)
    if not getattr(config_class, 'TESTING', False):
        setup_logging(config_class)

    logging.getLogger(__name__).info(
        f"Schedule board created for {current_user or 'anonymous viewer'} "
        f"({config_class.__name__})"
    )
    return ScheduleBoard(
        current_user=current_user,
        user_type=user_type,
        settings=config_class,
        **kwargs
    )
