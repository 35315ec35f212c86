"""
Orchestr CLI - inspect an application's container and event listeners.

Usage:
    orchestr container:list --app myapp.bootstrap:app
    orchestr event:list --app myapp.bootstrap:create_app --event user.created
"""

__cli_name__ = "orchestr"
