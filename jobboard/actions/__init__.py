"""Server actions: one async function per client operation.

- **envelope**: ``ActionResult``, the result every action returns
- **executor**: Runs one data operation per action with uniform error handling
- **schemas**: Field allow-lists for payloads and records
- **profile**, **job**, **application**, **feed**: Entity actions
- **payment**: Membership pricing and checkout
- **invalidation**: Cache invalidation signal fired after mutations
- **registry**: Action lookup by client-facing name
"""

from jobboard.actions.envelope import ActionResult
from jobboard.actions.registry import ACTIONS, get_action, invoke

__all__ = ["ACTIONS", "ActionResult", "get_action", "invoke"]
