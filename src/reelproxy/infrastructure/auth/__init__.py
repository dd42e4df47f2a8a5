from .static_token import SharedSecretLogin, StaticTokenVerifier

__all__ = ["SharedSecretLogin", "StaticTokenVerifier"]
