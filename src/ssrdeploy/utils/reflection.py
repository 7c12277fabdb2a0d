import importlib
import logging
from typing import Any

from ..exceptions import CollaboratorLoadError

logger = logging.getLogger(__name__)


def load_object(dotted: str) -> Any:
    """
    Import an object from a 'package.module:attr' path.

    Args:
        dotted: path such as 'ssrdeploy.bases.nuxt:NuxtBuilder'. A plain
            'package.module.attr' form is accepted as well.

    Returns:
        The referenced attribute.
    """
    if ":" in dotted:
        module_name, _, attr = dotted.partition(":")
    else:
        module_name, _, attr = dotted.rpartition(".")
    if not module_name or not attr:
        raise CollaboratorLoadError(f"Invalid object path '{dotted}', expected 'module:attr'.")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise CollaboratorLoadError(f"Could not import module '{module_name}': {e}") from e

    obj = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise CollaboratorLoadError(f"Module '{module_name}' has no attribute '{attr}'.") from e
    logger.debug(f"Loaded '{dotted}' -> {getattr(obj, '__name__', obj)}")
    return obj
