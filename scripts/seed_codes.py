import argparse

"""
CLI utility to seed the access code whitelist outside the web process.

Uses the same environment variables as the API (DATABASE_URL, ENCRYPTION_KEY,
ENCRYPTION_IV, ...). Seeding only happens when the table is empty.

Example usage:
    python scripts/seed_codes.py --count 10
    python scripts/seed_codes.py --status
"""


def main():
    parser = argparse.ArgumentParser(description="Seed or inspect the access code whitelist.")
    parser.add_argument("--count", type=int, default=None, help="Number of codes to generate (default: SEED_CODE_COUNT or 10)")
    parser.add_argument("--status", action="store_true", help="Only print how many codes are stored")
    args = parser.parse_args()
    if args.count is not None and args.count < 1:
        parser.error("--count must be at least 1")

    from utils.settings import get_settings
    from database import SessionLocal
    from services.bootstrap import initialize_store
    from services.code_store import AccessCodeStore
    from utils.cipher import CodeCipher

    settings = get_settings()
    if args.count is not None:
        settings = settings.model_copy(update={"seed_code_count": args.count})

    if args.status:
        db = SessionLocal()
        try:
            count = AccessCodeStore(db, CodeCipher.from_settings(settings)).count_all()
        finally:
            db.close()
        print(f"{count} access codes stored")
        return

    codes = initialize_store(settings)
    if not codes:
        print("Codes already exist in the database, skipping seeding.")
        return
    print("----------------------------------------------------------\n")
    for code in codes:
        print(code)


if __name__ == "__main__":
    main()
