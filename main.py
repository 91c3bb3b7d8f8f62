import argparse
import logging
import sys

from database.config import init_db, session_scope
from services.influencer_store import TemplateStore
from config.templates import MESSAGE_TEMPLATES
from auth.roles import OperatorRole
from auth.dependencies import create_access_token

# Configure Logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)


def setup_database():
    logging.info("Creating tables and seeding outreach templates...")
    init_db()
    with session_scope() as db:
        added = TemplateStore(db).seed_defaults(MESSAGE_TEMPLATES)
    logging.info(f"Setup complete. {added} templates added.")


def issue_token(email, name, role, hours):
    token = create_access_token(email, name=name, role=OperatorRole(role), expires_minutes=hours * 60)
    print(token)


def main():
    parser = argparse.ArgumentParser(description="Seeding OS management commands")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create tables and seed default templates")

    token_parser = subparsers.add_parser("issue-token", help="Print a bearer token for an operator")
    token_parser.add_argument("--email", required=True)
    token_parser.add_argument("--name", default=None)
    token_parser.add_argument("--role", choices=[r.value for r in OperatorRole], default=OperatorRole.MANAGER.value)
    token_parser.add_argument("--hours", type=int, default=24)

    args = parser.parse_args()

    if args.command == "init-db":
        setup_database()
    else:
        issue_token(args.email, args.name, args.role, args.hours)


if __name__ == "__main__":
    main()
