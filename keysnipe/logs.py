"""Console output helpers"""

import logging
from datetime import datetime


class CustomFormatter(logging.Formatter):
    """Custom formatter for console output"""

    def format(self, record):
        timestamp = datetime.now().strftime("%H:%M:%S")
        return f"[{timestamp}] {record.getMessage()}"


def setup_logging(level: int = logging.INFO):
    """Configure logging system (discord.py logs through here)"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(CustomFormatter())
    logger.addHandler(console_handler)

    return logger


class Colors:
    HEADER = '\033[95m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    UNDERLINE = '\033[4m'
    END = '\033[0m'
    GRAY = '\033[90m'


def timestamp() -> str:
    return datetime.now().strftime("%H:%M:%S")


def log(message: str, color: str = ""):
    """Print a timestamped console line, optionally colored"""
    if color:
        print(f"{Colors.GRAY}[{timestamp()}]{Colors.END} {color}{message}{Colors.END}", flush=True)
    else:
        print(f"{Colors.GRAY}[{timestamp()}]{Colors.END} {message}", flush=True)


def log_section(message: str, show_time: bool = False):
    width = 50
    if show_time:
        title = f"{message} - {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
    else:
        title = message

    print(f"\n{Colors.CYAN}{'─' * width}{Colors.END}")
    print(f"{Colors.CYAN}{Colors.BOLD}{title}{Colors.END}")
    print(f"{Colors.CYAN}{'─' * width}{Colors.END}")


def log_success(message: str):
    """Log a success message"""
    log(f"SUCCESS: {message}", Colors.GREEN)


def log_error(message: str):
    """Log an error message"""
    log(f"ERROR: {message}", Colors.RED)


def log_warning(message: str):
    """Log a warning message"""
    log(f"WARNING: {message}", Colors.YELLOW)


def log_key(key: str, status: str, details: str = "", color: str = Colors.CYAN):
    """Log key-related information with consistent formatting"""
    if details:
        log(f"{status}: {Colors.BOLD}{key}{Colors.END}{color}, {details}", color)
    else:
        log(f"{status}: {Colors.BOLD}{key}{Colors.END}", color)


def mask(value: str, keep: int = 3) -> str:
    """Mask a secret for display, keeping the first few characters"""
    if not value:
        return ""
    if "@" in value:
        name, domain = value.split("@", 1)
        return f"{name[:keep]}***@{domain}"
    return f"{value[:keep]}***"


def log_config(cfg):
    print("")
    print(f"{Colors.CYAN}Configuration:{Colors.END}")

    lengths = ", ".join(str(n) for n in sorted(cfg.key_lengths))
    servers = ", ".join(str(s) for s in sorted(cfg.server_ids))
    print(f"  {Colors.CYAN}Servers:{Colors.END} {Colors.BOLD}{servers or 'none'}{Colors.END}")
    print(f"  {Colors.CYAN}Key Lengths:{Colors.END} {Colors.BOLD}{lengths}{Colors.END}")
    print(f"  {Colors.CYAN}Strict Mode:{Colors.END} {Colors.BOLD}{cfg.strict}{Colors.END}")
    print(f"  {Colors.CYAN}Snipe Images:{Colors.END} {Colors.BOLD}{cfg.snipe_images}{Colors.END}")
    print(f"  {Colors.CYAN}Batch Keys:{Colors.END} {Colors.BOLD}{cfg.batch_keys}{Colors.END}")
    print(f"  {Colors.CYAN}Login Refresh:{Colors.END} {Colors.BOLD}every {cfg.auth_interval:g}s ({cfg.auth_failure_policy} on failure){Colors.END}")
    print(f"  {Colors.CYAN}Max Workers:{Colors.END} {Colors.BOLD}{cfg.max_workers}{Colors.END}")
    print(f"  {Colors.CYAN}Krampus Account:{Colors.END} {Colors.BOLD}{mask(cfg.login)}{Colors.END}")

    if not cfg.server_ids:
        print(f"  {Colors.YELLOW}[WARN] No server ids configured - every message will be ignored{Colors.END}")
    print("")
