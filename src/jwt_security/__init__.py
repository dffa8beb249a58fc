"""JWT Security

Idempotent registration of bearer-token authentication providers and
composable claims assembly.
"""

__version__ = "1.0.0"
