"""Seed script to create a business with an owner account and print a bearer token.

Usage:
    python -m slotwise.scripts.seed_owner --email=owner@example.com --business="Studio Nine" --slug=studio-nine

The token is signed with JWT_SECRET_KEY, so it only works against an API
running with the same secret.
"""

import argparse
import asyncio
import re
import sys
from sqlalchemy import select

from slotwise.core.database import async_session
from slotwise.models.business import Business
from slotwise.models.user import User
from slotwise.services.auth import create_access_token

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


async def create_owner(email: str, business_name: str, slug: str, timezone: str) -> str:
    """Create the business and its owner (or reuse them) and return an access token."""
    async with async_session() as db:
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user:
            print(f"User {email} already exists, issuing a new token.")
        else:
            result = await db.execute(select(Business).where(Business.slug == slug))
            business = result.scalar_one_or_none()

            if not business:
                business = Business(name=business_name, slug=slug, timezone=timezone, is_active=True)
                db.add(business)
                await db.flush()
                print(f"Created business: {business.name} (/{business.slug})")

            user = User(
                email=email,
                full_name=business_name,
                business_id=business.id,
                role="business_owner",
                is_active=True,
            )
            db.add(user)
            await db.commit()
            print(f"Created owner: {email}")

        return create_access_token({"sub": str(user.id)})


def main():
    """Parse CLI arguments and run the seed script."""
    parser = argparse.ArgumentParser(description="Create a business owner for Slotwise")
    parser.add_argument("--email", required=True, help="Owner email address")
    parser.add_argument("--business", required=True, help="Business display name")
    parser.add_argument("--slug", required=True, help="Public booking identifier, e.g. studio-nine")
    parser.add_argument("--timezone", default="UTC", help="IANA timezone of the business")

    args = parser.parse_args()

    if "@" not in args.email:
        print("Error: Invalid email format.", file=sys.stderr)
        sys.exit(1)

    if not SLUG_PATTERN.match(args.slug):
        print("Error: slug may only contain lowercase letters, digits and dashes.", file=sys.stderr)
        sys.exit(1)

    token = asyncio.run(create_owner(args.email, args.business, args.slug, args.timezone))
    print(f"\nBearer token:\n{token}")


if __name__ == "__main__":
    main()
