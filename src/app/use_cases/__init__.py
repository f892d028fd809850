"""
Use Cases

Organized into domain folders:
- recovery/: Account recovery flows
"""
