#!/usr/bin/env python3
"""Create the first admin account, or promote an existing staff account.

Usage:
    python scripts/bootstrap_admin.py --email admin@example.org --name "Desk Admin" --password secret123

    # Or through the environment:
    ADMIN_EMAIL=admin@example.org ADMIN_PASSWORD=secret123 python scripts/bootstrap_admin.py

The account is left Approved and active with a fresh validity window.
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


async def bootstrap_admin(email: str, name: str, password: str, dry_run: bool = False) -> str:
    """Returns 'created', 'promoted', 'already_admin' or 'dry_run'"""
    from config import ApplicationConfig
    from raffle_desk.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
    from raffle_desk.app.services.passwords import hash_password
    from raffle_desk.depends import AsyncSessionLocal, init_db
    from raffle_desk.domain.base import normalize_email, utcnow
    from raffle_desk.domain.entities import AccountStatus, StaffAccount, StaffRole

    email = normalize_email(email)
    await init_db()

    async with AsyncSessionLocal() as session:
        async with SqlAlchemyUnitOfWork(session) as uow:
            account = await uow.staff.get_by_email(email)

            if account is not None:
                if (
                    account.role == StaffRole.admin
                    and account.status == AccountStatus.approved
                    and account.active
                ):
                    print(f"{email} is already an approved admin")
                    return "already_admin"
                if dry_run:
                    print(f"[DRY RUN] Would promote {email} to approved admin")
                    return "dry_run"

                account.role = StaffRole.admin
                account.status = AccountStatus.approved
                account.active = True
                account.created_at = utcnow()
                await uow.staff.update(account)
                await uow.commit()
                print(f"Promoted {email} to approved admin")
                return "promoted"

            if dry_run:
                print(f"[DRY RUN] Would create admin {email}")
                return "dry_run"

            await uow.staff.create(
                StaffAccount(
                    email=email,
                    name=name,
                    role=StaffRole.admin,
                    password_hash=hash_password(password),
                    status=AccountStatus.approved,
                    active=True,
                    created_at=utcnow(),
                    validity_days=ApplicationConfig.DEFAULT_VALIDITY_DAYS,
                )
            )
            await uow.commit()
            print(f"Created admin {email}")
            return "created"


def main():
    parser = argparse.ArgumentParser(
        description="Bootstrap an admin account for the raffle desk",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--email", default=os.environ.get("ADMIN_EMAIL"), help="Admin email (or ADMIN_EMAIL)")
    parser.add_argument("--name", default=os.environ.get("ADMIN_NAME", "Administrator"), help="Display name")
    parser.add_argument(
        "--password", default=os.environ.get("ADMIN_PASSWORD"), help="Admin password (or ADMIN_PASSWORD)"
    )
    parser.add_argument("--dry-run", action="store_true", help="Show what would be done without making changes")
    args = parser.parse_args()

    if not args.email or not args.password:
        print("Error: --email and --password (or ADMIN_EMAIL / ADMIN_PASSWORD) are required")
        sys.exit(1)

    from config import ApplicationConfig

    if len(args.password) < ApplicationConfig.MIN_PASSWORD_LENGTH:
        print(f"Error: password must be at least {ApplicationConfig.MIN_PASSWORD_LENGTH} characters")
        sys.exit(1)

    try:
        asyncio.run(bootstrap_admin(args.email, args.name, args.password, args.dry_run))
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
