"""Domain services."""

from .base import Service
from .content_directory import ContentDirectory
from .identity_service import IdentityService
from .moderation_gate import ModerationGate
from .reply_counter import ReplyCounter
from .thread_paginator import RepliesOf, Scope, ThreadPage, ThreadPaginator, TopLevel
from .thread_service import ThreadService

__all__ = [
    "ContentDirectory",
    "IdentityService",
    "ModerationGate",
    "ReplyCounter",
    "RepliesOf",
    "Scope",
    "Service",
    "ThreadPage",
    "ThreadPaginator",
    "ThreadService",
    "TopLevel",
]
