from .settings import ProviderSettings
