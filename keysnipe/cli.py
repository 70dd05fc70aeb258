"""Entry point"""

import dataclasses
import sys
import traceback
from typing import List, Optional

import discord

from . import __version__
from .attachments import AttachmentResolver
from .auth import Authenticator
from .bot import SniperClient
from .config import Config, ConfigError
from .credentials import CredentialStore
from .dispatch import KeyDispatcher
from .logs import Colors, log, log_config, log_error, log_section, setup_logging
from .redeemer import KeyRedeemer
from .session import build_session

USAGE = """keysnipe - Usage:
  keysnipe                     # Normal operation (reads ./config.json)
  keysnipe --config PATH       # Use another config file
  keysnipe --verbose           # Show configuration and per-attachment errors
  keysnipe --help              # Show this help"""


def build_client(cfg: Config) -> SniperClient:
    """Wire the pipeline: one credential store shared by login and redemption"""
    store = CredentialStore()

    # Login gets its own session so its cookie jar never leaks into claims
    authenticator = Authenticator(cfg, store, build_session(cfg))

    session = build_session(cfg)
    redeemer = KeyRedeemer(cfg, store, session)
    resolver = AttachmentResolver(cfg, session)
    dispatcher = KeyDispatcher(cfg, redeemer, resolver)

    return SniperClient(dispatcher=dispatcher, authenticator=authenticator)


def main(argv: Optional[List[str]] = None) -> int:
    """Application entry point"""
    argv = sys.argv[1:] if argv is None else argv

    if "--help" in argv or "-h" in argv:
        print(USAGE)
        return 0

    log_section(f"keysnipe v{__version__}", show_time=True)

    config_path = None
    if "--config" in argv:
        index = argv.index("--config")
        if index + 1 >= len(argv):
            log_error("--config needs a path")
            return 2
        config_path = argv[index + 1]

    try:
        cfg = Config.load(config_path)
    except ConfigError as e:
        print(f"{Colors.RED}[ERROR]{Colors.END} Failed to Read Config: {Colors.BOLD}{e}{Colors.END}")
        return 1

    verbose = cfg.verbose or "--verbose" in argv
    if verbose and not cfg.verbose:
        cfg = dataclasses.replace(cfg, verbose=True)

    setup_logging()
    if cfg.verbose:
        log_config(cfg)

    client = build_client(cfg)

    log("Starting Client", Colors.GREEN)
    try:
        client.run(cfg.discord_token, log_handler=None)
    except KeyboardInterrupt:
        log("Interrupted by user")
    except discord.LoginFailure as e:
        log_error(f"Failed to Login to Discord: {e}")
        return 1
    except Exception as e:
        log_error(f"Failed to Start Client: {e}")
        if cfg.verbose:
            log(f"Traceback: {traceback.format_exc()}")
        return 1
    finally:
        client.dispatcher.shutdown(wait=False)

    return client.exit_code


if __name__ == "__main__":
    sys.exit(main())
