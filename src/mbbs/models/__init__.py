from .user import User
from .group import Group, GroupPermission
from .category import Category
from .thread import Thread, ThreadIsApproved, ALL_NOT_DELETED_THREAD_FILTER, NORMAL_THREAD_FILTER
from .post import Post, PostLike

__all__ = [
    "User",
    "Group",
    "GroupPermission",
    "Category",
    "Thread",
    "ThreadIsApproved",
    "ALL_NOT_DELETED_THREAD_FILTER",
    "NORMAL_THREAD_FILTER",
    "Post",
    "PostLike",
]
