"""
Use Cases

Business logic is organized into domain folders:
- invitations/: Invitation lifecycle (create, lookup, accept, reject,
  resend, conflict resolution, expiry sweep, retention purge)
"""
