"""
Chessmate services: persistence and business rules behind the API.

Usage:
    from chessmate.services import (
        create_tournament,
        create_registration,
        create_post,
    )
"""

from chessmate.services.blog import (
    create_post,
    generate_slug,
    get_post_by_slug,
    import_posts,
    list_posts,
    load_posts_from_directory,
)
from chessmate.services.registrations import (
    create_registration,
    delete_registration,
    list_registrations_for_tournament,
    update_registration,
)
from chessmate.services.tournaments import (
    create_tournament,
    delete_tournament,
    get_tournament,
    list_tournaments,
    update_tournament,
)

__all__ = [
    # Tournaments
    "create_tournament",
    "delete_tournament",
    "get_tournament",
    "list_tournaments",
    "update_tournament",
    # Registrations
    "create_registration",
    "delete_registration",
    "list_registrations_for_tournament",
    "update_registration",
    # Blog
    "create_post",
    "generate_slug",
    "get_post_by_slug",
    "import_posts",
    "list_posts",
    "load_posts_from_directory",
]
