"""Custodial Wallet Admin Service.

This service provides APIs for platform administrators to:
- Review pending deposit and withdrawal requests
- Confirm or reject transactions with balance settlement
- Receive email notifications for every transaction event
- Suspend, activate and search user accounts
"""

__version__ = "0.1.0"
