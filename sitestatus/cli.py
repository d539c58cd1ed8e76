"""
Command line entry point for one check run.

Usage:
  check-sites [config_file] [--test-email]
  check-sites --generate-key <client name>
"""
import logging
import sys
from pathlib import Path

from .config import settings, load_monitor_config
from .middleware import generate_api_key
from .services.checker import SiteChecker
from .services.notification_service import NotificationError
from .services.uptime_tracker import UptimeTracker
from .store import DataStore

logger = logging.getLogger(__name__)


def print_usage():
    print("Usage: check-sites [config_file] [--test-email]")
    print("       check-sites --generate-key <client_name>")
    print("")
    print("Options:")
    print("  --test-email    Send a test email to verify email configuration")
    print("  --generate-key  Print a new API key for the /events endpoint")


def generate_new_key(client_name: str) -> str:
    api_key = generate_api_key()

    print("\n" + "=" * 60)
    print("  NEW API KEY GENERATED")
    print("=" * 60)
    print(f"\nClient Name: {client_name}")
    print(f"API Key:     {api_key}")
    print("\nAdd it to your .env file:")
    print(f"\nAPI_KEY_1={api_key}")
    print(f'API_KEY_1_NAME="{client_name}"')
    print("\nThen send checks with:")
    print(f'headers = {{"X-API-Key": "{api_key}"}}')
    print("\n" + "=" * 60)
    print()
    return api_key


def main(argv=None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    if "--generate-key" in args:
        name_parts = args[args.index("--generate-key") + 1:]
        if not name_parts:
            print("❌ Error: Please provide a client name")
            print_usage()
            return 1
        generate_new_key(" ".join(name_parts))
        return 0

    test_email_mode = "--test-email" in args
    config_file = next((a for a in args if not a.startswith("--")), settings.SITES_CONFIG)

    if not Path(config_file).exists():
        print(f"Error: Configuration file '{config_file}' not found")
        print_usage()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s %(message)s',
    )

    config = load_monitor_config(config_file)
    checker = SiteChecker(config, UptimeTracker(DataStore(settings.DATA_DIR)))

    try:
        if test_email_mode:
            if config.email is None:
                print("Error: No email configuration found in config file")
                return 1
            print(f"Sending test email to {config.email.to}...")
            try:
                checker.send_test_email()
            except NotificationError as e:
                print(f"Failed to send test email: {e}")
                return 1
            print("Test email sent successfully!")
            return 0

        outcomes = checker.check_all_sites()
    finally:
        checker.client.close()

    failed = [o for o in outcomes if not o.ok]
    if failed:
        print(f"\n{len(failed)} site(s) failed the check")
    else:
        print("\nAll sites passed the check!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
