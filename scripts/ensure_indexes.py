"""Create or verify the MongoDB indexes. Safe to run repeatedly."""

from staffpicks.config import get_settings
from staffpicks.core.logging import configure_logging
from staffpicks.infrastructure.database import close_client, ensure_indexes, get_database


def main():
    configure_logging()
    settings = get_settings()
    db = get_database()
    try:
        ensure_indexes(db)
        for name in ("users", "companies", "stores", "books", "lists", "rate_limits"):
            print(f"{name}: {sorted(db[name].index_information())}")
        print(f"Indexes ready on {settings.MONGODB_DB}")
    finally:
        close_client()


if __name__ == "__main__":
    main()
