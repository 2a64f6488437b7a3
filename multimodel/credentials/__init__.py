from .store import ENV_FIELDS, VAULT_KEY_NAMES, CredentialStore
from .vault import SupabaseVault, VaultClient, VaultLookup, VaultStatus
