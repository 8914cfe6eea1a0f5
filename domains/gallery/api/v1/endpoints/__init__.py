from domains.gallery.api.v1.endpoints import health, static, upload

__all__ = ["health", "static", "upload"]
