from artifacthandoff.infrastructure.rendering.http_renderer import HttpCatalogRenderer

__all__ = ["HttpCatalogRenderer"]
