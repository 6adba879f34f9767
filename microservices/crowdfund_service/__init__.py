"""
Crowdfund Service

Fundraising campaign ledger microservice providing:
- Campaign creation with a funding goal and a deadline in days
- Donations accepted until the deadline and up to the goal
- Campaign lookup, deadline lookup, metadata updates and deletion

Port: 8260
"""

__version__ = "1.0.0"
__service__ = "crowdfund_service"
