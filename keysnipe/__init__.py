"""
keysnipe: Discord license key sniper

Watches allow-listed servers for license keys in message text and screenshots
and claims them concurrently against the Krampus redemption API.
"""

__version__ = "1.0"
