"""
Bootstrap seed script: creates the first super_admin.

Admin users are normally created through ``POST /admin/users``, which itself
requires a super_admin, so the first one has to be written directly:

    python seed_admin.py --email admin@example.com --password 'change-me-now' \\
        --first-name Super --last-name Admin

Only works with IDENTITY_PROVIDER=local; with GoTrue create the identity in
the Supabase dashboard and insert the admin_users row by hand.
"""
import argparse
import sys

from voyage_admin.auth.directory import AdminDirectory
from voyage_admin.auth.identity import ProviderError
from voyage_admin.auth.local_provider import LocalIdentityProvider
from voyage_admin.config import settings
from voyage_admin.database import Base, SessionLocal, engine
from voyage_admin.schemas.admin_user import normalize_email


def seed(email: str, password: str, first_name: str, last_name: str) -> int:
    email = normalize_email(email)
    if settings.IDENTITY_PROVIDER != "local":
        print("❌ seed_admin.py only supports IDENTITY_PROVIDER=local")
        return 1

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        provider = LocalIdentityProvider(db, session_lifetime=settings.SESSION_LIFETIME_SECONDS)
        try:
            identity = provider.create_user(email, password, email_confirm=True)
        except ProviderError as exc:
            print(f"❌ Could not create identity for {email}: {exc}")
            return 1

        profile = AdminDirectory(db).insert(
            user_id=identity.id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            role="super_admin",
            created_by=None,
        )
        print(f"✓ Created super_admin {profile.email} ({profile.id})")
        return 0
    finally:
        db.close()


def main() -> int:
    parser = argparse.ArgumentParser(description="Create the first super_admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--first-name", default="Super")
    parser.add_argument("--last-name", default="Admin")
    args = parser.parse_args()

    if len(args.password) < 8:
        print("❌ Password must be at least 8 characters")
        return 1

    return seed(args.email, args.password, args.first_name, args.last_name)


if __name__ == "__main__":
    sys.exit(main())
