# shoppingcart/services/model_resolver.py
from typing import Any, Callable

from shoppingcart.domain.errors import ModelResolutionFailure
from shoppingcart.utils.logging import get_logger

logger = get_logger(__name__)

Loader = Callable[[Any], Any]


class ModelResolver:
    """
    Rejestr tag -> loader. Pozycja koszyka trzyma tylko (model_type, model_id),
    a obiekt dociaga sie przez loader zarejestrowany pod tym tagiem.
    """

    def __init__(self, loaders: dict[str, Loader] | None = None):
        self._loaders: dict[str, Loader] = dict(loaders or {})

    def register(self, tag: str, loader: Loader) -> "ModelResolver":
        self._loaders[tag] = loader
        return self

    def resolve(self, tag: str, model_id: Any) -> Any:
        loader = self._loaders.get(tag)
        if loader is None:
            raise ModelResolutionFailure(f"No loader registered for model type {tag!r}")

        logger.info(f"Resolve model {tag}:{model_id}")
        model = loader(model_id)
        if model is None:
            raise ModelResolutionFailure(f"Model {tag}:{model_id} not found")
        return model
