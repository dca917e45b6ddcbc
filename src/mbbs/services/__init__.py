# Re-export primary service layer entry points for convenience.
from .user import (
    create_user,
    get_user_or_404,
    authenticate,
    list_users,
    UserNotFoundError,
    DuplicateUserError,
)
from .category import (
    create_category,
    get_category_or_404,
    list_categories,
    CategoryNotFoundError,
)
from .thread import (
    get_thread,
    get_thread_or_404,
    get_thread_cache,
    can_edit_by_user,
    can_hide_by_user,
    can_view_by_user,
    to_view_json,
    save_and_update_thread_count,
    create_thread,
    update_thread,
    moderate_thread,
    soft_delete_thread,
    increment_view_count,
    list_threads,
    ThreadNotFoundError,
)
from .post import (
    create_reply,
    like_first_post,
    list_posts,
    PostNotFoundError,
)

__all__ = [
    # user
    "create_user",
    "get_user_or_404",
    "authenticate",
    "list_users",
    "UserNotFoundError",
    "DuplicateUserError",
    # category
    "create_category",
    "get_category_or_404",
    "list_categories",
    "CategoryNotFoundError",
    # thread
    "get_thread",
    "get_thread_or_404",
    "get_thread_cache",
    "can_edit_by_user",
    "can_hide_by_user",
    "can_view_by_user",
    "to_view_json",
    "save_and_update_thread_count",
    "create_thread",
    "update_thread",
    "moderate_thread",
    "soft_delete_thread",
    "increment_view_count",
    "list_threads",
    "ThreadNotFoundError",
    # post
    "create_reply",
    "like_first_post",
    "list_posts",
    "PostNotFoundError",
]
