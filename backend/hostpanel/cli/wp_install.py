"""Command-line WordPress installer.

Installs WordPress for one domain on the machine it runs on: creates the
MySQL database and user, unpacks the release into ``<web_root>/<domain>``,
writes ``wp-config.php`` and the Nginx vhost, then runs the web installer.

    hostpanel-wp-install <domain> <db_name> <db_user> <db_password> \\
        <wp_admin_user> <wp_admin_password> <wp_admin_email> [site_title]
"""

import argparse
import asyncio
import json
import sys

from hostpanel.config import get_settings
from hostpanel.domain.entities import WordPressInstallConfig, WordPressInstallResult
from hostpanel.infrastructure.installer_factory import build_wordpress_installer
from hostpanel.infrastructure.logging.log_config import setup_logging
from hostpanel.infrastructure.runners import LocalCommandRunner

USAGE = (
    "%(prog)s <domain> <db_name> <db_user> <db_password> "
    "<wp_admin_user> <wp_admin_password> <wp_admin_email> [site_title]"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hostpanel-wp-install",
        usage=USAGE,
        description="Install WordPress with its database and Nginx site.",
    )
    parser.add_argument("domain")
    parser.add_argument("db_name")
    parser.add_argument("db_user")
    parser.add_argument("db_password")
    parser.add_argument("wp_admin_user")
    parser.add_argument("wp_admin_password")
    parser.add_argument("wp_admin_email")
    parser.add_argument("site_title", nargs="?", default=None, help="Defaults to the domain")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument(
        "--no-rollback",
        action="store_true",
        help="Leave partial work in place when a step fails",
    )
    return parser


def format_result(result: WordPressInstallResult) -> str:
    if not result.success:
        return f"WordPress installation failed: {result.error}"
    return "\n".join([
        "WordPress installation successful!",
        f"Site URL: {result.site_url}",
        f"Admin URL: {result.admin_url}",
        f"Admin User: {result.admin_user}",
        f"Admin Password: {result.admin_password}",
    ])


async def run(args: argparse.Namespace) -> WordPressInstallResult:
    settings = get_settings()
    runner = LocalCommandRunner(default_timeout=settings.command_timeout)
    installer = build_wordpress_installer(runner, rollback=not args.no_rollback, settings=settings)
    config = WordPressInstallConfig(
        domain=args.domain,
        db_name=args.db_name,
        db_user=args.db_user,
        db_password=args.db_password,
        wp_admin_user=args.wp_admin_user,
        wp_admin_password=args.wp_admin_password,
        wp_admin_email=args.wp_admin_email,
        site_title=args.site_title,
    )
    try:
        return await installer.install(config)
    finally:
        await runner.close()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        # argparse exits 2 on usage errors
        return 1 if exc.code == 2 else int(exc.code or 0)

    setup_logging()
    try:
        result = asyncio.run(run(args))
    except Exception as exc:
        result = WordPressInstallResult(success=False, error=str(exc), errors=[str(exc)])

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_result(result))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
