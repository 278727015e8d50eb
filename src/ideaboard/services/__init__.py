# Re-export primary service layer entry points for convenience.
from .user import (
    create_user,
    get_user_or_404,
    delete_user,
    update_user_email,
    list_users,
    UserNotFoundError,
    DuplicateEmailError,
)
from .idea import (
    create_idea,
    get_idea,
    list_ideas,
    update_idea,
    delete_idea,
)
from .schedule import (
    schedule_idea,
    unschedule_idea,
    batch_schedule,
    list_scheduled,
    list_scheduled_today,
)
from .generation import generate_ideas

__all__ = [
    # user
    "create_user",
    "get_user_or_404",
    "delete_user",
    "update_user_email",
    "list_users",
    "UserNotFoundError",
    "DuplicateEmailError",
    # idea
    "create_idea",
    "get_idea",
    "list_ideas",
    "update_idea",
    "delete_idea",
    # schedule
    "schedule_idea",
    "unschedule_idea",
    "batch_schedule",
    "list_scheduled",
    "list_scheduled_today",
    # generation
    "generate_ideas",
]
