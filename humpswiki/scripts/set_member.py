"""
Flag a post as a member page (listed by GET /getMembers). Run from project root:
  python -m humpswiki.scripts.set_member "Post Title"
  python -m humpswiki.scripts.set_member "Post Title" --remove
"""
import argparse
import logging
import sys

from humpswiki.core.config import get_settings
from humpswiki.core.database import Database
from humpswiki.services import post_store

logger = logging.getLogger(__name__)


def set_member(database: Database, title: str, is_member: bool) -> int:
    db = database.session()
    try:
        post = post_store.get_post_by_title(db, title)
        if post is None:
            print(f"Post '{title}' not found.", file=sys.stderr)
            return 1
        post.is_member = is_member
        db.commit()
        logger.info("Post %r is_member=%s", title, is_member)
        print(f"Post '{title}' is_member={is_member}.")
        return 0
    finally:
        db.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Mark or unmark a post as a member page.")
    parser.add_argument("title", help="Exact post title")
    parser.add_argument("--remove", action="store_true", help="Clear the member flag instead")
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    database = Database(settings.DATABASE_URL)
    try:
        return set_member(database, args.title, not args.remove)
    finally:
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
