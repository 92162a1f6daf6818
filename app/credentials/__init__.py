"""
Credential gate and process-wide single-flight credential cache.
Secrets live in memory only; nothing here persists or logs them.
"""

from .gate import (
    Credentials,
    CredentialGate,
    EnvCredentialGate,
    StaticCredentialGate,
    RemoteCredentialGate,
    credentials_to_wire,
    credentials_from_wire,
    describe_availability,
    read_env_credentials,
)
from .store import CredentialStore, get_credential_store, set_credential_store

__all__ = [
    "Credentials",
    "CredentialGate",
    "EnvCredentialGate",
    "StaticCredentialGate",
    "RemoteCredentialGate",
    "credentials_to_wire",
    "credentials_from_wire",
    "describe_availability",
    "read_env_credentials",
    "CredentialStore",
    "get_credential_store",
    "set_credential_store",
]
