#!/usr/bin/env python
"""Idempotent seed script for the permission tree & role presets.

Usage:
    python backend/scripts/seed_authz.py               # seed normally
    python backend/scripts/seed_authz.py --show-roles  # print role -> permission counts (after ensuring seed)
    python backend/scripts/seed_authz.py --dry-run     # run logic then rollback (no DB changes)
    python backend/scripts/seed_authz.py --validate    # check the stored permission tree; exits 2 on problems
"""
from __future__ import annotations
import argparse, sys, textwrap
from sqlalchemy import text

from canteen_authz import create_app, get_db
from canteen_authz.models.authz import Base
import canteen_authz.models.catalog  # noqa: F401  (registers canteen tables)
from canteen_authz.services.seeding import (
    build_role_permission_map, ensure_permissions, ensure_roles, permission_nodes, validate_permission_tree,
)


def print_role_summary(mapping):
    if not mapping:
        print("[INFO] No roles present.")
        return
    name_w = max(len(code) for code in mapping)
    print(f"{'Role'.ljust(name_w)} | Count | Sample (up to 8)")
    print('-' * (name_w + 40))
    for code, perms in sorted(mapping.items()):
        print(f"{code.ljust(name_w)} | {str(len(perms)).rjust(5)} | {', '.join(perms[:8])}")


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Seed canteen permissions & roles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""Examples:\n  seed normally: seed_authz.py\n  dry run: seed_authz.py --dry-run\n  show roles: seed_authz.py --show-roles\n""")
    )
    p.add_argument('--show-roles', action='store_true', help='Print role permission counts after seeding')
    p.add_argument('--dry-run', action='store_true', help='Rollback after operations (no commit)')
    p.add_argument('--validate', action='store_true', help='Validate the permission tree; exits non-zero on problems')
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    app = create_app()
    with app.app_context():
        session = get_db()
        try:
            # Ensure tables exist (lightweight fallback if migrations not run yet)
            session.execute(text('SELECT 1 FROM permissions LIMIT 1'))
        except Exception:
            session.rollback()
            Base.metadata.create_all(session.get_bind())
        finally:
            session.commit()

    with app.app_context():
        session = get_db()
        try:
            created_p = ensure_permissions(session)
            created_r = ensure_roles(session)
            if args.validate:
                problems = validate_permission_tree(permission_nodes(session))
                if problems:
                    print('\n[VALIDATION] FAIL:')
                    for problem in problems:
                        print(' -', problem)
                    session.rollback()
                    return 2
                print('[VALIDATION] OK: permission tree is acyclic and codes are unique.')
            if args.dry_run:
                session.rollback()
                print(f"[DRY-RUN] (rolled back) Permissions would create: {created_p}, Roles would create: {created_r}")
            else:
                session.commit()
                print(f"[DONE] Permissions created: {created_p}, Roles created: {created_r}")
            if args.show_roles:
                print('\nRole Permission Summary:')
                print_role_summary(build_role_permission_map(session))
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
