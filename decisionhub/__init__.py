"""
Decision Intelligence Hub.

SaaS backend for describing business decisions, getting AI analysis and
risk simulations of them, collaborating on them with teammates and paying
for tiered access.

Architecture:
- Entitlements: role + subscription per user, read by every gated operation
- Cases: decision descriptions with an append-only revision trail
- AI: tier-dispatched analysis, fixed-backend simulation, ephemeral insights
- Billing: Stripe checkout, webhook-driven role changes, product provisioning
- Team: direct membership, invitations, notifications, access log
- Export: CSV and printable HTML renditions of a case
"""

__version__ = "1.0.0"
