from palace.config.settings import settings

__all__ = ["settings"]
