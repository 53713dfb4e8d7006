"""Create the marketplace tables on the configured database."""

from bitslow_market.db.session import create_tables


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()


if __name__ == "__main__":
    init_db()
    print("Database initialized.")
